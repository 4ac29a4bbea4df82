from typing import Iterable

from ..schemas import Analytics, ValuationResult

def summarize(results: Iterable[ValuationResult]) -> Analytics:
    """
    Highest / lowest / mean over successful amounts. No rounding here;
    that is a display concern.
    """
    amounts = [
        r.valuation_amount for r in results
        if r.status == "success" and r.valuation_amount is not None
    ]
    if not amounts:
        return Analytics()
    return Analytics(
        highest=max(amounts),
        lowest=min(amounts),
        average=sum(amounts) / len(amounts),
    )
