from typing import Protocol
from ..data.base import TargetKind
from ..schemas import ValuationResult

class ValuationExtractor(Protocol):
    # Which ValuationSource field this extractor consumes as its query target
    target_kind: TargetKind

    def ensure_configured(self) -> None:
        """Raise ConfigurationError if a credential is missing."""
        ...

    async def extract(self, source: str, query_target: str, address: str) -> ValuationResult:
        """
        Returns exactly one result for ``source``. Must never raise:
        network, timeout and parsing failures come back as status ``error``
        or ``not_available``.
        """
        ...
