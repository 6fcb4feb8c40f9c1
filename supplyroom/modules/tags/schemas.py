from pydantic import BaseModel
from typing import Optional
from datetime import datetime

# Colours offered by the tag form, keyed by hex value
TAG_COLOR_PALETTE = {
    "#3B82F6": "blue",
    "#10B981": "green",
    "#F59E0B": "orange",
    "#EF4444": "red",
    "#8B5CF6": "purple",
    "#EC4899": "pink",
}
DEFAULT_TAG_COLOR = "#3B82F6"


class TagCreate(BaseModel):
    name: str
    color: str = DEFAULT_TAG_COLOR
    group_id: str


class TagResponse(BaseModel):
    id: str
    name: str
    color: str
    group_id: str
    created_by: str
    created_at: datetime
    group_name: Optional[str] = None

    class Config:
        from_attributes = True


class TagColorOption(BaseModel):
    value: str
    label: str
