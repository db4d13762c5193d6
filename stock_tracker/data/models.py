"""Stock tracker Pydantic models.

These models double as the persisted cache format and the wire format of the
remote data source, so the serialized field names (``dollars``,
``lastUpdate``) must not change.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator


class PricePoint(BaseModel):
    """One observed price at one instant."""

    time: datetime
    amount: float = Field(..., alias="dollars")  # No sign check, zero and negative are legal

    class Config:
        frozen = True
        populate_by_name = True


class TrackedStock(BaseModel):
    """A stock symbol with its chronological price history.

    Symbols are unique per user, so the symbol is the identity: two
    ``TrackedStock`` values are equal when their symbols are.
    """

    symbol: str = Field(..., min_length=1)
    history: List[PricePoint] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def id(self) -> str:
        return self.symbol

    @property
    def current_price(self) -> Optional[float]:
        """Latest observed price, or None when there is no history."""
        if not self.history:
            return None
        return self.history[-1].amount

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TrackedStock):
            return self.symbol == other.symbol
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.symbol)


class UserProfile(BaseModel):
    """The user, the stocks they track, and when those were last refreshed."""

    id: Optional[str] = None  # Server-issued
    name: str
    stocks: List[TrackedStock] = Field(default_factory=list)
    last_update: Optional[datetime] = Field(None, alias="lastUpdate")

    class Config:
        frozen = True
        populate_by_name = True

    @field_validator("stocks")
    @classmethod
    def validate_unique_symbols(cls, stocks: List[TrackedStock]) -> List[TrackedStock]:
        """Reject stock lists that track the same symbol twice."""
        seen = set()
        for stock in stocks:
            if stock.symbol in seen:
                raise ValueError(f"Duplicate stock symbol: {stock.symbol}")
            seen.add(stock.symbol)
        return stocks

    @classmethod
    def default(cls, name: str, user_id: Optional[str] = None) -> "UserProfile":
        """First-run profile: nothing tracked yet and never updated."""
        return cls(id=user_id, name=name)

    @classmethod
    def from_json(cls, data: str | bytes) -> "UserProfile":
        """Decode a profile from its JSON record.

        Raises:
            pydantic.ValidationError: if the record is malformed
        """
        return cls.model_validate_json(data)

    def to_json(self) -> str:
        """Encode the profile as a JSON record using the persisted field names."""
        return self.model_dump_json(by_alias=True, indent=2)

    def with_stocks(self, stocks: Iterable[TrackedStock], updated_at: datetime) -> "UserProfile":
        """Return a copy whose stocks are fully replaced and stamped ``updated_at``.

        Raises:
            pydantic.ValidationError: if ``stocks`` repeats a symbol
        """
        return UserProfile(
            id=self.id,
            name=self.name,
            stocks=list(stocks),
            last_update=updated_at,
        )
