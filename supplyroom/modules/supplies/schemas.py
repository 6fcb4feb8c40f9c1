from pydantic import BaseModel, computed_field
from typing import Optional
from datetime import datetime

from supplyroom.modules.supplies.profit import calculate_profit


class SupplyCreate(BaseModel):
    name: str
    quantity: float = 0
    cost: float = 0
    sale_price: float = 0
    market_price: float = 0
    tag_id: Optional[str] = None
    group_id: str


class SupplyUpdate(BaseModel):
    # Only fields sent by the client are applied; tag_id=None clears the tag
    name: Optional[str] = None
    quantity: Optional[float] = None
    cost: Optional[float] = None
    sale_price: Optional[float] = None
    market_price: Optional[float] = None
    tag_id: Optional[str] = None
    group_id: Optional[str] = None


class SupplyTag(BaseModel):
    name: str
    color: str


class SupplyResponse(BaseModel):
    id: str
    name: str
    quantity: float
    cost: float
    sale_price: float
    market_price: float
    tag_id: Optional[str] = None
    group_id: str
    created_by: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    tag: Optional[SupplyTag] = None
    group_name: Optional[str] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def profit(self) -> float:
        return calculate_profit(self)
