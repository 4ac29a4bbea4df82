from .base import ValuationExtractor
from ..core.utils import fnv1a_32, seeded_rand, normalize_address
from ..schemas import ValuationResult

class MockExtractor(ValuationExtractor):
    """
    Deterministic placeholder extractor. Uses the address + source seed to
    produce plausible HKD figures so the UI can be exercised offline.
    """
    target_kind = "prompt"

    def ensure_configured(self) -> None:
        return None

    async def extract(self, source: str, query_target: str, address: str) -> ValuationResult:
        addr = normalize_address(address)
        # Base price driven by the address alone, so sources roughly agree
        base = 3_000_000 + seeded_rand(fnv1a_32(addr), 1)[0] * 22_000_000
        # Each source deviates up to +/- 6% from the shared base
        jitter = (seeded_rand(fnv1a_32(f"{source}|{addr}"), 1)[0] - 0.5) * 0.12
        return ValuationResult.success(source, float(round(base * (1 + jitter), -3)))
