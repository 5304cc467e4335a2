from typing import Optional

from loguru import logger

from directory_etl.config import BUSINESS_STATUS
from directory_etl.models import (
    Business,
    BusinessCategoryLink,
    Category,
    PipelineOutput,
    SourceRecord,
)
from directory_etl.timestamps import isoformat_utc, parse_datetime, utc_now


def parse_registration_date(record: SourceRecord) -> Optional[str]:
    """
    Convert the registry's registration date into an ISO timestamp.

    A missing date gives None. An unparseable one also gives None and a
    warning; it never rejects the record.
    """
    raw = record.registration_date
    if not raw.strip():
        return None
    parsed = parse_datetime(raw)
    if parsed is None:
        logger.warning(f"Invalid date for company: {record.company_name}, Date: {raw}")
        return None
    return isoformat_utc(parsed)


class RelationalProjector:
    """Appends businesses, categories and links to the run's output buffers."""

    def __init__(self, output: PipelineOutput, status: str = BUSINESS_STATUS, clock=utc_now):
        self.output = output
        self.status = status
        self.clock = clock

    def project(self, record: SourceRecord, business_id: str, category: Category, created: bool) -> Business:
        now = isoformat_utc(self.clock())
        business = Business(
            id=business_id,
            name=record.company_name,
            description=record.classification,
            address=record.address,
            phone=record.phone,
            email=record.email,
            website=record.website,
            status=self.status,
            created_at=parse_registration_date(record),
            updated_at=now,
        )
        self.output.businesses.append(business)

        if created:
            self.output.categories.append(category)

        self.output.links.append(BusinessCategoryLink(
            business_id=business.id,
            category_id=category.id,
            created_at=now,
            updated_at=now,
        ))
        return business
