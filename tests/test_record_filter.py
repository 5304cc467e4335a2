from directory_etl.models import SourceRecord
from directory_etl.record_filter import RecordFilter, is_valid_area, is_valid_postal_code


def _record(status="Active", address="MG Road, Vijayawada"):
    return SourceRecord(company_name="Sri Lakshmi Traders", status=status, address=address)


def test_inactive_record_is_rejected():
    entry = RecordFilter().check(_record(status="Closed"))
    assert entry is not None
    assert "not active" in entry.message
    assert "Sri Lakshmi Traders" in entry.message


def test_status_gate_runs_before_geography():
    entry = RecordFilter().check(_record(status="Strike Off", address="Banjara Hills, Hyderabad"))
    assert entry.reason == "is not active."


def test_status_must_match_exactly():
    assert RecordFilter().check(_record(status="active")) is not None


def test_area_match_is_case_insensitive():
    assert is_valid_area("door 12, KRISHNA district")
    assert RecordFilter().check(_record(address="near bus stand, mangalagiri")) is None


def test_postal_code_allow_list():
    assert is_valid_postal_code("Plot 4, Industrial Estate, 522501")
    assert not is_valid_postal_code("Plot 4, Industrial Estate, 500001")
    assert not is_valid_postal_code("Survey no 5225012")


def test_any_six_digit_token_can_qualify():
    assert is_valid_postal_code("Flat 110001, Block C, 520010")


def test_out_of_region_record_is_rejected():
    entry = RecordFilter().check(_record(address="Banjara Hills, Hyderabad 500034"))
    assert entry is not None
    assert entry.message.endswith("is outside the Amaravati Capital Region.")


def test_geography_gate_can_be_disabled():
    assert RecordFilter(geo_filter=False).check(_record(address="Banjara Hills, Hyderabad")) is None
    assert RecordFilter(geo_filter=False).check(_record(status="Closed")) is not None
