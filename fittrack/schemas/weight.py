# schemas/weight.py
from datetime import datetime
from typing import List, Literal

from .base import CamelModel, DatedInput


class WeightCreate(DatedInput):
    weight: float | None = None
    notes: str | None = None


class WeightUpdate(DatedInput):
    weight: float | None = None
    notes: str | None = None


class WeightEntry(CamelModel):
    id: str
    user_id: str
    weight: float
    date: datetime
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class WeightList(CamelModel):
    weights: List[WeightEntry]


class WeightStats(CamelModel):
    current: float
    change: float
    average: float
    trend: Literal["increasing", "decreasing", "stable"]
    count: int
