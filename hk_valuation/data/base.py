from typing import Protocol, Optional, Literal
from dataclasses import dataclass, asdict

TargetKind = Literal["prompt", "url"]

DEFAULT_PROMPT = (
    'What is the current property valuation estimate from {source} for the property at '
    '"{address}" in Hong Kong? Please provide only the numerical value in Hong Kong Dollars (HKD). '
    'If you find a valuation, respond with just the number without currency symbols or commas. '
    'If no valuation is available, respond with "NOT_AVAILABLE". Focus on getting the most recent '
    "valuation data from {source}'s property valuation service or mortgage calculator."
)

# ----- Data shapes (thin & explicit) -----

@dataclass(frozen=True)
class ValuationSource:
    name: str                  # stable id and display label, e.g. "Hang Seng Bank"
    url: str                   # public valuation page, used by the page-fetch extractor
    prompt: str = DEFAULT_PROMPT  # template with {source} and {address}

    def query_target(self, kind: TargetKind) -> str:
        return self.url if kind == "url" else self.prompt

@dataclass(frozen=True)
class ValuationLogRow:
    address: str
    source: str
    valuation_amount: Optional[float]
    status: str
    error_message: Optional[str]
    session_id: str

    def to_dict(self) -> dict:
        return asdict(self)

# ----- Protocols (interfaces) -----

class ValuationLog(Protocol):
    def ensure_configured(self) -> None: ...
    async def insert(self, row: ValuationLogRow) -> None: ...
