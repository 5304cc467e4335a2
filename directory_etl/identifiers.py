from typing import Callable, Dict, Tuple, Union
from uuid import uuid4

from directory_etl.config import FALLBACK_CATEGORY
from directory_etl.models import Category, CategoryOutcome, Fallback, Mapped
from directory_etl.timestamps import isoformat_utc, utc_now


def uuid4_str() -> str:
    return str(uuid4())


class IdentifierAssigner:
    """
    Mints business ids and keeps the run's category registry.

    Categories are deduplicated by exact label. The fallback category is keyed
    by its tag rather than its label, so it can never merge with a mapped one.
    One instance per run; it must not be shared between inputs.
    """

    def __init__(
        self,
        id_factory: Callable[[], str] = uuid4_str,
        clock=utc_now,
        fallback_label: str = FALLBACK_CATEGORY,
    ):
        self.id_factory = id_factory
        self.clock = clock
        self.fallback_label = fallback_label
        self._registry: Dict[Union[str, Fallback], Category] = {}

    def new_business_id(self) -> str:
        return self.id_factory()

    def resolve(self, outcome: CategoryOutcome) -> Tuple[Category, bool]:
        """
        Return the category for a classification outcome.

        Returns:
            Tuple[Category, bool]: The category and whether it was registered by this call.
        """
        if isinstance(outcome, Mapped):
            key, name = outcome.label, outcome.label
        else:
            key, name = Fallback(), self.fallback_label

        category = self._registry.get(key)
        if category is not None:
            return category, False

        now = isoformat_utc(self.clock())
        category = Category(
            id=self.id_factory(),
            name=name,
            description=name,
            created_at=now,
            updated_at=now,
        )
        self._registry[key] = category
        return category, True
