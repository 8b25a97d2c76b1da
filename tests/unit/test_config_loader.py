from pathlib import Path

import pytest

from clinic_points.common.config_loader import load_config, resolve_api_key
from clinic_points.common.errors import ConfigError

REPO_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

BASE_YAML = """geocoder:
  endpoint: https://geocoder.test/1.x/
  lang: en_US
  kind: house
  format: json
dispatch:
  max_in_flight: 10
output:
  default_format: json
"""


def test_load_config_from_repo_config_dir():
    bundle = load_config(REPO_CONFIG_DIR)

    assert bundle.geocoder["endpoint"] == "https://geocode-maps.yandex.ru/1.x/"
    assert bundle.geocoder["lang"] == "ru_RU"
    assert bundle.geocoder["kind"] == "house"
    assert bundle.max_in_flight == 10
    assert bundle.default_format == "json"


def test_load_config_applies_overlay_values(tmp_path: Path):
    base = tmp_path / "base"
    overlay = tmp_path / "overlay"
    base.mkdir()
    overlay.mkdir()
    (base / "geocoder.yml").write_text(BASE_YAML, encoding="utf-8")
    (overlay / "geocoder.yml").write_text(
        """dispatch:
  max_in_flight: 4
output:
  default_format: js
""",
        encoding="utf-8",
    )

    bundle = load_config(base, overlay_config_dir=overlay)

    assert bundle.max_in_flight == 4
    assert bundle.default_format == "js"
    assert bundle.geocoder["lang"] == "en_US"


def test_load_config_ignores_empty_overlay_file(tmp_path: Path):
    base = tmp_path / "base"
    overlay = tmp_path / "overlay"
    base.mkdir()
    overlay.mkdir()
    (base / "geocoder.yml").write_text(BASE_YAML, encoding="utf-8")
    (overlay / "geocoder.yml").write_text("", encoding="utf-8")

    bundle = load_config(base, overlay_config_dir=overlay)

    assert bundle.max_in_flight == 10


def test_load_config_missing_file_raises(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_invalid_yaml_raises(tmp_path: Path):
    (tmp_path / "geocoder.yml").write_text("geocoder: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_resolve_api_key_from_environment():
    cfg = {"api_key_env": "GEOCODER_KEY"}

    assert resolve_api_key(cfg, environ={"GEOCODER_KEY": " abc "}) == "abc"
    assert resolve_api_key(cfg, environ={}) is None
    assert resolve_api_key({}, environ={"GEOCODER_KEY": "abc"}) is None
