import logging
from typing import List
from .base import ValuationLog, ValuationLogRow
from ..core.config import Settings
from ..core.errors import ConfigurationError, PersistenceError
import httpx

logger = logging.getLogger(__name__)

class MemoryValuationLog(ValuationLog):
    """
    Append-only in-process log for local dev and tests (opt-in via
    VALUATION_LOG_PROVIDER=memory); rows vanish with the process.
    """
    def __init__(self):
        self.rows: List[ValuationLogRow] = []

    def ensure_configured(self) -> None:
        return None

    async def insert(self, row: ValuationLogRow) -> None:
        self.rows.append(row)

class SupabaseValuationLog(ValuationLog):
    """
    Inserts one row per result through Supabase's PostgREST endpoint.
    Insert-only: this service never reads the table back.
    """
    def __init__(self, base_url: str | None, service_key: str | None, table: str = "valuations",
                 timeout: float = 10, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = (base_url or "").rstrip("/")
        self.service_key = service_key
        self.table = table
        self.timeout = timeout
        self.transport = transport

    def ensure_configured(self) -> None:
        if not self.base_url or not self.service_key:
            raise ConfigurationError("Supabase URL and service role key must be configured")

    async def insert(self, row: ValuationLogRow) -> None:
        headers = {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(f"{self.base_url}/rest/v1/{self.table}", json=row.to_dict(), headers=headers)
                r.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise PersistenceError(
                f"insert into {self.table} failed: {exc.response.status_code} {exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise PersistenceError(f"insert into {self.table} failed: {exc}") from exc

def valuation_log(settings: Settings) -> ValuationLog:
    """
    Factory picks supabase unless the memory log is asked for explicitly.
    """
    if settings.VALUATION_LOG_PROVIDER == "memory":
        return MemoryValuationLog()
    return SupabaseValuationLog(
        settings.SUPABASE_URL,
        settings.SUPABASE_SERVICE_ROLE_KEY,
        table=settings.VALUATION_LOG_TABLE,
    )
