"""
Single-pass pipeline that turns registry rows into directory tables.

Each record goes Filter → Classifier → IdentifierAssigner → Projector before
the next one is read. Outputs stay in memory until `commit`, which writes all
of them at once.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from loguru import logger

from directory_etl.classifier import CategoryClassifier
from directory_etl.config import (
    BUSINESS_STATUS,
    FALLBACK_CATEGORY,
    GEO_FILTER,
    REJECT_UNCLASSIFIED,
)
from directory_etl.errors import CategoryTableError, IntegrityError
from directory_etl.identifiers import IdentifierAssigner, uuid4_str
from directory_etl.models import Fallback, PipelineOutput, RejectionEntry, SourceRecord
from directory_etl.projector import RelationalProjector
from directory_etl.record_filter import RecordFilter
from directory_etl.tables import OutputPaths, load_source_records, write_outputs
from directory_etl.timestamps import utc_now


class PipelineState(Enum):
    STREAMING = "streaming"
    FINALIZING = "finalizing"
    DONE = "done"


@dataclass
class PipelineOptions:
    geo_filter: bool = GEO_FILTER
    business_status: str = BUSINESS_STATUS
    fallback_label: str = FALLBACK_CATEGORY
    reject_unclassified: bool = REJECT_UNCLASSIFIED
    id_factory: Callable[[], str] = uuid4_str
    clock: Callable = field(default=utc_now)


class DirectoryPipeline:
    """One run over one source. Create a new instance for every input."""

    def __init__(self, classifier: CategoryClassifier, options: Optional[PipelineOptions] = None):
        self.options = options or PipelineOptions()
        if self.options.fallback_label in set(classifier.table.values()):
            raise CategoryTableError(
                f"Fallback category '{self.options.fallback_label}' is also a mapped label"
            )
        self.classifier = classifier
        self.output = PipelineOutput()
        self.record_filter = RecordFilter(geo_filter=self.options.geo_filter)
        self.assigner = IdentifierAssigner(
            id_factory=self.options.id_factory,
            clock=self.options.clock,
            fallback_label=self.options.fallback_label,
        )
        self.projector = RelationalProjector(
            self.output,
            status=self.options.business_status,
            clock=self.options.clock,
        )
        self.state = PipelineState.STREAMING

    def _require(self, state: PipelineState) -> None:
        if self.state is not state:
            raise RuntimeError(f"Pipeline is {self.state.value}, expected {state.value}")

    def _reject(self, entry: RejectionEntry) -> None:
        self.output.rejections.append(entry)

    def feed(self, record: SourceRecord) -> bool:
        """
        Process one source record.

        Returns:
            bool: True if the record made it into the output tables.
        """
        self._require(PipelineState.STREAMING)

        rejection = self.record_filter.check(record)
        if rejection is not None:
            self._reject(rejection)
            return False

        outcome = self.classifier.classify_record(record)
        if isinstance(outcome, Fallback) and self.options.reject_unclassified:
            self._reject(RejectionEntry(
                name=record.company_name,
                address=record.address,
                reason="has no matching simplified category.",
            ))
            return False

        business_id = self.assigner.new_business_id()
        category, created = self.assigner.resolve(outcome)
        self.projector.project(record, business_id, category, created)
        return True

    def feed_all(self, records: Iterable[SourceRecord]) -> int:
        return sum(1 for record in records if self.feed(record))

    def finalize(self) -> PipelineOutput:
        """Stop streaming, build the summary index and check link integrity."""
        self._require(PipelineState.STREAMING)
        self.state = PipelineState.FINALIZING

        categories_by_id = {c.id: c.name for c in self.output.categories}
        businesses_by_id = {b.id: b for b in self.output.businesses}
        descriptions: Dict[str, str] = {}
        for link in self.output.links:
            business = businesses_by_id.get(link.business_id)
            if business is None:
                raise IntegrityError(f"Link references unknown business {link.business_id}")
            name = categories_by_id.get(link.category_id)
            if name is None:
                raise IntegrityError(f"Link references unknown category {link.category_id}")
            if business.description:
                descriptions.setdefault(name, business.description)
        self.output.category_descriptions = descriptions
        return self.output

    def commit(self, paths: OutputPaths) -> List[str]:
        """Write all outputs; the run is done once this returns."""
        self._require(PipelineState.FINALIZING)
        written = write_outputs(self.output, paths)
        self.state = PipelineState.DONE
        return written


def run_pipeline(
    source_path: str,
    paths: OutputPaths,
    options: Optional[PipelineOptions] = None,
    classifier: Optional[CategoryClassifier] = None,
) -> PipelineOutput:
    """
    Build the directory tables from a registry CSV.

    Args:
        source_path (str): Registry CSV (raw or annotated).
        paths (OutputPaths): Output destinations.
        options (PipelineOptions): Run options; defaults come from config.
        classifier (CategoryClassifier): Defaults to the packaged table.

    Returns:
        PipelineOutput: The committed outputs.
    """
    options = options or PipelineOptions()
    classifier = classifier or CategoryClassifier.from_csv(fallback_label=options.fallback_label)
    pipeline = DirectoryPipeline(classifier, options)
    records = load_source_records(source_path)
    logger.info(f"Loaded {len(records)} records from {source_path}")

    accepted = pipeline.feed_all(records)
    output = pipeline.finalize()
    pipeline.commit(paths)

    logger.info(
        f"✅ {accepted} businesses, {len(output.categories)} categories, "
        f"{len(output.links)} links, {len(output.rejections)} rejections"
    )
    if output.rejections:
        logger.info(f"Errors were logged to {paths.error_log}")
    return output
