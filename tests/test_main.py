from main import main

RAW_CSV = """CompanyName,CompanyStatus,CompanyIndustrialClassification,Registered_Office_Address
Krishna Schools Pvt Ltd,Active,Education,"Benz Circle, Vijayawada"
Old Mills Ltd,Closed,Textiles,Guntur
"""


def test_annotate_then_build(tmp_path):
    raw = tmp_path / "raw.csv"
    updated = tmp_path / "updated.csv"
    raw.write_text(RAW_CSV)

    assert main(["annotate", "--input", str(raw), "--output", str(updated)]) == 0
    assert main(["build", "--input", str(updated), "--output-dir", str(tmp_path)]) == 0

    assert (tmp_path / "businesses.csv").exists()
    assert (tmp_path / "business_categories.csv").exists()
    assert (tmp_path / "business_category_mappings.csv").exists()
    assert "Old Mills Ltd" in (tmp_path / "category_errors.log").read_text()


def test_fatal_error_exits_non_zero(tmp_path):
    assert main(["build", "--input", str(tmp_path / "missing.csv"), "--output-dir", str(tmp_path)]) == 1


def test_no_geo_filter_flag_keeps_out_of_region_businesses(tmp_path):
    raw = tmp_path / "raw.csv"
    raw.write_text(
        "CompanyName,CompanyStatus,CompanyIndustrialClassification,Registered_Office_Address\n"
        "Deccan Insurers,Active,Insurance,\"Banjara Hills, Hyderabad 500034\"\n"
    )

    assert main(["build", "--input", str(raw), "--output-dir", str(tmp_path), "--no-geo-filter"]) == 0

    assert "Deccan Insurers" in (tmp_path / "businesses.csv").read_text()
    assert not (tmp_path / "category_errors.log").exists()
