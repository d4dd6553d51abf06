# schemas/meal.py
from datetime import datetime
from typing import List

from .base import CamelModel


class Meal(CamelModel):
    id: str
    user_id: str
    name: str
    date: datetime
    calories: int | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    notes: str | None = None
    image_url: str | None = None
    created_at: datetime
    updated_at: datetime


class MealList(CamelModel):
    meals: List[Meal]


class NutritionTotals(CamelModel):
    date: datetime
    count: int
    calories: int
    protein: float
    carbs: float
    fat: float
