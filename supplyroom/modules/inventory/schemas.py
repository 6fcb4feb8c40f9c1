from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_supplies: int = 0
    total_groups: int = 0
    total_tags: int = 0
    total_profit: float = 0
