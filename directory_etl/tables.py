import csv
import json
import os
import tempfile
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from loguru import logger

from directory_etl.config import BUSINESSES_CSV, CATEGORIES_CSV, ERROR_LOG, MAPPINGS_CSV
from directory_etl.errors import OutputWriteError, SourceReadError
from directory_etl.models import (
    BUSINESS_COLUMNS,
    CATEGORY_COLUMNS,
    LINK_COLUMNS,
    PipelineOutput,
    SourceRecord,
)


@dataclass
class OutputPaths:
    """Destinations for the four outputs of a run."""
    businesses: str = BUSINESSES_CSV
    categories: str = CATEGORIES_CSV
    mappings: str = MAPPINGS_CSV
    error_log: str = ERROR_LOG

    @classmethod
    def in_directory(cls, directory: str) -> "OutputPaths":
        return cls(
            businesses=os.path.join(directory, BUSINESSES_CSV),
            categories=os.path.join(directory, CATEGORIES_CSV),
            mappings=os.path.join(directory, MAPPINGS_CSV),
            error_log=os.path.join(directory, ERROR_LOG),
        )


def read_source_frame(file_path: str, nrows: Optional[int] = None) -> pd.DataFrame:
    """Read a registry CSV with every cell as a string and blanks as ''."""
    try:
        return pd.read_csv(file_path, dtype=str, keep_default_na=False, nrows=nrows)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except (OSError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise SourceReadError(file_path, str(e)) from e


def load_source_records(file_path: str, nrows: Optional[int] = None) -> List[SourceRecord]:
    """Load the registry CSV and convert each row to a SourceRecord."""
    df = read_source_frame(file_path, nrows=nrows)
    return [SourceRecord.from_row(row) for row in df.to_dict("records")]


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def write_table(file_path: str, rows: Sequence[Dict[str, Any]], columns: Sequence[str]) -> None:
    """Write rows in a fixed column order, every field quoted."""
    df = pd.DataFrame(
        [[format_cell(row.get(col)) for col in columns] for row in rows],
        columns=list(columns),
    )
    df.to_csv(file_path, index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def _temp_path_for(target: str) -> str:
    directory = os.path.dirname(os.path.abspath(target))
    fd, tmp = tempfile.mkstemp(prefix=".tmp-", suffix=os.path.basename(target), dir=directory)
    os.close(fd)
    return tmp


def write_outputs(output: PipelineOutput, paths: OutputPaths) -> List[str]:
    """
    Materialize a run's outputs.

    Everything is written to temp files next to the targets first and only
    moved into place once all writes succeeded, so a failed run leaves the
    previous outputs untouched. The rejection log is written only when there
    were rejections.

    Returns:
        List[str]: Paths that were written.
    """
    jobs = [
        (paths.businesses, [b.to_row() for b in output.businesses], BUSINESS_COLUMNS),
        (paths.categories, [c.to_row() for c in output.categories], CATEGORY_COLUMNS),
        (paths.mappings, [link.to_row() for link in output.links], LINK_COLUMNS),
    ]

    staged: List[tuple] = []
    current = None
    try:
        for target, rows, columns in jobs:
            current = target
            tmp = _temp_path_for(target)
            staged.append((tmp, target))
            write_table(tmp, rows, columns)

        if output.rejections:
            current = paths.error_log
            tmp = _temp_path_for(paths.error_log)
            staged.append((tmp, paths.error_log))
            with open(tmp, "w", encoding="utf-8") as f:
                f.write("\n".join(entry.message for entry in output.rejections))

        for tmp, target in staged:
            current = target
            os.replace(tmp, target)
    except Exception as e:
        for tmp, _ in staged:
            if os.path.exists(tmp):
                os.remove(tmp)
        raise OutputWriteError(current, str(e)) from e

    written = [target for _, target in staged]
    for target in written:
        logger.debug(f"Wrote {target}")
    return written
