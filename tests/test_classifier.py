import pytest

from directory_etl.classifier import CategoryClassifier, load_category_table, resolve_slug, slugify
from directory_etl.errors import CategoryTableError
from directory_etl.models import Fallback, Mapped, SourceRecord


@pytest.fixture(scope="module")
def classifier():
    return CategoryClassifier.from_csv(fallback_label="Uncategorized")


def test_slugify_strips_punctuation_and_underscores_spaces():
    text = "Manufacturing (Metals & Chemicals, and products thereof)"
    assert slugify(text) == "manufacturing_metals__chemicals_and_products_thereof"


def test_slugify_is_total():
    assert slugify("") == ""
    assert slugify(None) == ""
    assert slugify("!!!") == ""
    assert slugify("Education") == "education"


def test_packaged_table_loads(classifier):
    assert len(classifier.table) == 91
    assert classifier.table["education"] == "Education"


def test_mapped_and_fallback_outcomes(classifier):
    assert classifier.classify("education") == Mapped("Education")
    assert classifier.classify("") == Fallback(slug="")
    assert isinstance(classifier.classify("underwater_basket_weaving"), Fallback)


def test_unclassified_slug_is_a_real_category(classifier):
    """The registry's own 'Unclassified' bucket is a mapped label, not the fallback."""
    assert classifier.classify("unclassified") == Mapped("Unclassified")


def test_many_slugs_share_one_label(classifier):
    assert classifier.classify("manufacture_of_chemicals_and_chemical_products") == Mapped("Chemicals")
    assert classifier.classify(slugify("Manufacturing (Metals & Chemicals, and products thereof)")) == Mapped("Chemicals")


def test_precomputed_slug_wins_over_classification_text(classifier):
    record = SourceRecord(classification="Education", simplified_category="insurance")
    assert resolve_slug(record) == "insurance"
    assert classifier.classify_record(record) == Mapped("Insurance")

    record = SourceRecord(classification="Education")
    assert classifier.classify_record(record) == Mapped("Education")


def _write_table(tmp_path, body):
    path = tmp_path / "table.csv"
    path.write_text("slug,label\n" + body)
    return str(path)


def test_duplicate_slug_is_rejected(tmp_path):
    path = _write_table(tmp_path, "education,Education\neducation,Schools\n")
    with pytest.raises(CategoryTableError, match="duplicate slug"):
        load_category_table(path, fallback_label="Uncategorized")


def test_label_colliding_with_fallback_is_rejected(tmp_path):
    path = _write_table(tmp_path, "misc,Uncategorized\n")
    with pytest.raises(CategoryTableError, match="fallback"):
        load_category_table(path, fallback_label="Uncategorized")


def test_unnormalized_slug_is_rejected(tmp_path):
    path = _write_table(tmp_path, "Higher Education,Education\n")
    with pytest.raises(CategoryTableError, match="not a normalized slug"):
        load_category_table(path, fallback_label="Uncategorized")


def test_missing_table_file(tmp_path):
    with pytest.raises(CategoryTableError):
        load_category_table(str(tmp_path / "nope.csv"))
