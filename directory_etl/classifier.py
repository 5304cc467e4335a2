import re
from typing import Dict, Optional

import pandas as pd
from loguru import logger

from directory_etl.config import CATEGORY_TABLE_CSV, FALLBACK_CATEGORY
from directory_etl.errors import CategoryTableError
from directory_etl.models import CategoryOutcome, Fallback, Mapped, SourceRecord

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9 ]")
_VALID_SLUG = re.compile(r"^[a-z0-9_]+$")


def slugify(text: Optional[str]) -> str:
    """
    Normalize free-text industrial classification into a slug.

    Lower-cases, drops everything outside [a-z0-9 ] and turns each space into
    an underscore, so "Manufacturing (Metals & Chemicals, and products thereof)"
    becomes "manufacturing_metals__chemicals_and_products_thereof".
    """
    return _NON_SLUG_CHARS.sub("", (text or "").lower()).replace(" ", "_")


def resolve_slug(record: SourceRecord) -> str:
    """Prefer the slug precomputed by the annotate stage, else derive it."""
    return record.simplified_category or slugify(record.classification)


def load_category_table(
    path: str = CATEGORY_TABLE_CSV,
    fallback_label: str = FALLBACK_CATEGORY,
) -> Dict[str, str]:
    """
    Load and validate the slug→label classification table.

    Args:
        path (str): CSV file with `slug` and `label` columns.
        fallback_label (str): Label reserved for unclassified records; the
                              table may not use it.

    Returns:
        Dict[str, str]: Mapping of slug to category label.
    """
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise CategoryTableError(f"Cannot load category table '{path}': {e}") from e

    missing = {"slug", "label"} - set(df.columns)
    if missing:
        raise CategoryTableError(f"Category table '{path}' is missing columns: {sorted(missing)}")

    table: Dict[str, str] = {}
    for line_no, (slug, label) in enumerate(zip(df["slug"], df["label"]), start=2):
        slug, label = slug.strip(), label.strip()
        if not slug or not label:
            raise CategoryTableError(f"{path}:{line_no}: empty slug or label")
        if not _VALID_SLUG.match(slug):
            raise CategoryTableError(f"{path}:{line_no}: '{slug}' is not a normalized slug")
        if slug in table:
            raise CategoryTableError(f"{path}:{line_no}: duplicate slug '{slug}'")
        if label == fallback_label:
            raise CategoryTableError(
                f"{path}:{line_no}: label '{label}' collides with the fallback category"
            )
        table[slug] = label

    logger.debug(f"Loaded {len(table)} category mappings ({len(set(table.values()))} labels) from {path}")
    return table


class CategoryClassifier:
    """Maps slugs to short category labels through a static table."""

    def __init__(self, table: Dict[str, str]):
        self.table = dict(table)

    @classmethod
    def from_csv(cls, path: str = CATEGORY_TABLE_CSV, fallback_label: str = FALLBACK_CATEGORY) -> "CategoryClassifier":
        return cls(load_category_table(path, fallback_label))

    def classify(self, slug: str) -> CategoryOutcome:
        label = self.table.get(slug)
        if label is None:
            return Fallback(slug=slug)
        return Mapped(label=label)

    def classify_record(self, record: SourceRecord) -> CategoryOutcome:
        return self.classify(resolve_slug(record))
