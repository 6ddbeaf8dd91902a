"""Exchange-rate endpoint schemas."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class FxRateOut(BaseModel):
    rate: float
    date: str  # YYYY-MM-DD of the ECB observation


class FxConversionOut(BaseModel):
    amount: float
    from_currency: str
    to_currency: str
    rate: float
    source: Literal["identity", "stored", "remote", "fallback"]
    converted: float
