"""
Pydantic schemas for the wire payloads.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from quotation.models import Quotation


class UpstreamQuotation(BaseModel):
    """Quotation as published by the upstream API."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    code: str
    code_in: str = Field(alias="codein")
    name: str
    high: str
    low: str
    var_bid: str = Field(alias="varBid")
    pct_change: str = Field(alias="pctChange")
    bid: str
    ask: str
    timestamp: str
    create_date: str

    def to_model(self) -> Quotation:
        return Quotation(**self.model_dump())


class UpstreamEnvelope(BaseModel):
    """Upstream response body: the quotation wrapped under the pair key."""

    usdbrl: UpstreamQuotation = Field(alias="USDBRL")


class QuotationResponse(BaseModel):
    """Response model for the bid relayed to clients."""

    bid: str


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str
    status_code: Optional[int] = None
