"""
Usage stats schemas.
"""

from pydantic import BaseModel, Field


class StatsResponse(BaseModel):
    daily_count: int = Field(..., description="Entries created since local midnight")
    daily_limit: int
    remaining: int
    reset_time: str = Field(..., description='Time until midnight, e.g. "5h 12m"')
