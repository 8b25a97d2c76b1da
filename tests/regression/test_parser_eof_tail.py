import pytest

from clinic_points.ingest.listing_parser import ListingParser, parse_listing


@pytest.mark.regression
def test_block_without_trailing_blank_line_is_dropped():
    records = parse_listing(["1.\n", "First\n", "Addr 1\n", "111\n", "\n", "Second\n", "Addr 2\n", "222\n"])

    assert [r.name for r in records] == ["First"]


@pytest.mark.regression
def test_dropped_tail_is_reported():
    parser = ListingParser()
    records = parser.parse(["ClinicA\n", "Main St 1\n", "555-1234"])

    assert records == []
    assert parser.dropped_tail == "ClinicA"
