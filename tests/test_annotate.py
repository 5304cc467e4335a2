import pandas as pd

from directory_etl.annotate import annotate_simplified_categories

RAW_CSV = """CompanyName,CompanyStatus,CompanyIndustrialClassification,Registered_Office_Address
Krishna Schools Pvt Ltd,Active,Education,Vijayawada
Guntur Chem Works,Active,"Manufacturing (Metals & Chemicals, and products thereof)",Guntur
Blank Co,Active,,Tenali
"""


def test_adds_slug_column(tmp_path):
    src = tmp_path / "raw.csv"
    dst = tmp_path / "updated.csv"
    src.write_text(RAW_CSV)

    count = annotate_simplified_categories(str(src), str(dst))

    df = pd.read_csv(dst, dtype=str, keep_default_na=False)
    assert count == 3
    assert list(df.columns)[-1] == "simplified_category"
    assert list(df["simplified_category"]) == [
        "education",
        "manufacturing_metals__chemicals_and_products_thereof",
        "",
    ]
    assert list(df["CompanyName"]) == ["Krishna Schools Pvt Ltd", "Guntur Chem Works", "Blank Co"]


def test_output_fields_are_quoted(tmp_path):
    src = tmp_path / "raw.csv"
    dst = tmp_path / "updated.csv"
    src.write_text(RAW_CSV)

    annotate_simplified_categories(str(src), str(dst))

    lines = dst.read_text().splitlines()
    assert lines[1] == '"Krishna Schools Pvt Ltd","Active","Education","Vijayawada","education"'


def test_header_only_input_gives_header_only_output(tmp_path):
    src = tmp_path / "raw.csv"
    dst = tmp_path / "updated.csv"
    src.write_text("CompanyName,CompanyIndustrialClassification\n")

    count = annotate_simplified_categories(str(src), str(dst))

    assert count == 0
    assert dst.read_text().splitlines() == [
        '"CompanyName","CompanyIndustrialClassification","simplified_category"'
    ]
