from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Optional
from pydantic import BaseModel, Field

# Exact, finite and non-negative; stored as a JSON string
Quantity = Annotated[Decimal, Field(ge=0, allow_inf_nan=False)]


class MealType(str, Enum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"
    DESSERTS = "Desserts"


class Ingredient(BaseModel):
    id: Optional[int] = None
    name: str = Field(..., min_length=1)
    quantity: Quantity
    unit: str = ""


class IngredientPayload(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: Quantity
    unit: str = ""


class RecipePayload(BaseModel):
    name: str
    ingredients: List[Ingredient] = []
    instructions: List[str] = []
    nutritional_info: List[str] = []
    meal_type: MealType


class Recipe(RecipePayload):
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class ShoppingList(BaseModel):
    items: List[Ingredient] = []
    missing_recipe_ids: List[int] = []
    sufficient: bool = True
