import csv

from loguru import logger

from directory_etl.classifier import slugify
from directory_etl.errors import OutputWriteError
from directory_etl.models import SOURCE_COLUMNS
from directory_etl.tables import read_source_frame

CLASSIFICATION_COLUMN = SOURCE_COLUMNS["classification"]
SLUG_COLUMN = SOURCE_COLUMNS["simplified_category"]


def annotate_simplified_categories(input_path: str, output_path: str) -> int:
    """
    Add a `simplified_category` slug column to a raw registry export.

    This is the first stage of the two-stage run: the build stage can then use
    the precomputed slug instead of deriving it again.

    Args:
        input_path (str): Raw registry CSV.
        output_path (str): Where to write the annotated CSV.

    Returns:
        int: Number of data rows written.
    """
    df = read_source_frame(input_path)

    if CLASSIFICATION_COLUMN in df.columns:
        df[SLUG_COLUMN] = df[CLASSIFICATION_COLUMN].map(slugify)
    else:
        logger.warning(f"{input_path} has no {CLASSIFICATION_COLUMN} column; slugs will be empty")
        df[SLUG_COLUMN] = ""

    try:
        df.to_csv(output_path, index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    except OSError as e:
        raise OutputWriteError(output_path, str(e)) from e

    logger.info(f"Annotated {len(df)} rows → {output_path}")
    return len(df)
