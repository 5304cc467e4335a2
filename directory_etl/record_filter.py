import re
from typing import Iterable, Optional

from loguru import logger

from directory_etl.models import RejectionEntry, SourceRecord
from directory_etl.region import REGION_NAME, VALID_AREAS, VALID_DISTRICTS, VALID_POSTAL_CODES

ACTIVE_STATUS = "Active"

_POSTAL_CODE = re.compile(r"\b\d{6}\b")


def is_valid_area(address: str, names: Iterable[str] = (*VALID_AREAS, *VALID_DISTRICTS)) -> bool:
    """True if the address mentions one of the region's areas or districts."""
    normalized = address.lower()
    return any(name.lower() in normalized for name in names)


def is_valid_postal_code(address: str, allowed: Iterable[str] = VALID_POSTAL_CODES) -> bool:
    """True if any standalone 6-digit token in the address is an allowed postal code."""
    allowed = set(allowed)
    return any(code in allowed for code in _POSTAL_CODE.findall(address))


class RecordFilter:
    """
    Decides whether a source record is eligible for the directory.

    The status gate always runs first; the geography gate only runs for
    active records and only when `geo_filter` is enabled.
    """

    def __init__(self, geo_filter: bool = True):
        self.geo_filter = geo_filter

    def check(self, record: SourceRecord) -> Optional[RejectionEntry]:
        """
        Args:
            record (SourceRecord): Record to check.

        Returns:
            Optional[RejectionEntry]: None when accepted, otherwise the rejection to log.
        """
        if record.status != ACTIVE_STATUS:
            return self._reject(record, "is not active.")

        if self.geo_filter:
            address = record.address
            if not is_valid_area(address) and not is_valid_postal_code(address):
                return self._reject(record, f"is outside the {REGION_NAME}.")

        return None

    @staticmethod
    def _reject(record: SourceRecord, reason: str) -> RejectionEntry:
        entry = RejectionEntry(name=record.company_name, address=record.address, reason=reason)
        logger.debug(f"Rejected: {entry.message}")
        return entry
