from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .core.utils import MAX_AMOUNT

Status = Literal["success", "not_available", "error"]

class AggregationRequest(BaseModel):
    # Both optional so a missing field maps to our 400, not a framework 422
    model_config = ConfigDict(populate_by_name=True)

    address: str | None = None
    session_id: str | None = Field(default=None, alias="sessionId")

class ValuationResult(BaseModel):
    """
    One source's answer. Immutable once built; an amount is present
    exactly when the status is ``success``.
    """
    model_config = ConfigDict(frozen=True)

    source: str
    valuation_amount: float | None = None
    status: Status
    error_message: str | None = None

    @model_validator(mode="after")
    def _amount_matches_status(self):
        if self.status == "success":
            if self.valuation_amount is None:
                raise ValueError("success requires a valuation_amount")
            if not 0 < self.valuation_amount < MAX_AMOUNT:
                raise ValueError(f"valuation_amount out of range: {self.valuation_amount}")
        elif self.valuation_amount is not None:
            raise ValueError(f"{self.status} must not carry a valuation_amount")
        return self

    @classmethod
    def success(cls, source: str, amount: float) -> "ValuationResult":
        return cls(source=source, valuation_amount=amount, status="success")

    @classmethod
    def not_available(cls, source: str, message: str) -> "ValuationResult":
        return cls(source=source, status="not_available", error_message=message)

    @classmethod
    def error(cls, source: str, message: str) -> "ValuationResult":
        return cls(source=source, status="error", error_message=message)

class Analytics(BaseModel):
    highest: float | None = None
    lowest: float | None = None
    average: float | None = None

class AggregationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    valuations: list[ValuationResult]
    analytics: Analytics
    address: str
    session_id: str = Field(alias="sessionId")

class ErrorResponse(BaseModel):
    error: str
