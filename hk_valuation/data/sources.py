"""Fixed, ordered registry of valuation sources.

Order matters: responses list valuations in exactly this order.
"""

from .base import ValuationSource

SOURCES: tuple[ValuationSource, ...] = (
    ValuationSource(
        name="HSBC Hong Kong",
        url="https://www.hsbc.com.hk/mortgages/tools/property-valuation/",
    ),
    ValuationSource(
        name="Hang Seng Bank",
        url="https://www.hangseng.com/en-hk/personal/mortgages/property-valuation/",
    ),
    ValuationSource(
        name="Bank of China (Hong Kong)",
        url="https://www.bochk.com/en/mortgage/tools/propertyvaluation.html",
    ),
    ValuationSource(
        name="Standard Chartered Hong Kong",
        url="https://www.sc.com/hk/borrow/mortgages/property-valuation/",
    ),
    ValuationSource(
        name="Centaline Property",
        url="https://hk.centanet.com/estate/en/index",
    ),
)

def source_names() -> list[str]:
    return [s.name for s in SOURCES]
