from __future__ import annotations
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List
from pydantic import TypeAdapter
from .errors import RecipeNotFound, IngredientNotFound, InsufficientQuantity
from .models import Recipe, RecipePayload, Ingredient, IngredientPayload, MealType, Quantity
from .storage import SqliteStore, RECIPE_COUNTER, INGREDIENT_COUNTER

logger = logging.getLogger(__name__)

_quantity = TypeAdapter(Quantity)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RecipeService:
    def __init__(self, store: SqliteStore):
        self.store = store

    async def add(self, payload: RecipePayload) -> Recipe:
        async with self.store.recipes_lock:
            rid = await self.store.next_id(RECIPE_COUNTER)
            recipe = Recipe(
                id=rid,
                name=payload.name,
                ingredients=[ing.model_copy() for ing in payload.ingredients],
                instructions=list(payload.instructions),
                nutritional_info=list(payload.nutritional_info),
                meal_type=payload.meal_type,
                created_at=_now(),
            )
            await self.store.put_recipe(recipe)
        logger.info("recipe_added id=%s name=%s", recipe.id, recipe.name)
        return recipe

    async def get(self, recipe_id: int) -> Recipe:
        recipe = await self.store.get_recipe(recipe_id)
        if recipe is None:
            raise RecipeNotFound(f"A recipe with id={recipe_id} not found")
        return recipe

    async def update(self, recipe_id: int, payload: RecipePayload) -> Recipe:
        async with self.store.recipes_lock:
            current = await self.store.get_recipe(recipe_id)
            if current is None:
                raise RecipeNotFound(f"Couldn't update a recipe with id={recipe_id}. Recipe not found")
            # A fresh record; identity and creation time come from the stored one
            updated = Recipe(
                id=current.id,
                created_at=current.created_at,
                updated_at=_now(),
                **payload.model_dump(),
            )
            await self.store.put_recipe(updated)
        logger.info("recipe_updated id=%s", recipe_id)
        return updated

    async def delete(self, recipe_id: int) -> Recipe:
        async with self.store.recipes_lock:
            removed = await self.store.delete_recipe(recipe_id)
        if removed is None:
            raise RecipeNotFound(f"Couldn't delete a recipe with id={recipe_id}. Recipe not found")
        logger.info("recipe_deleted id=%s", recipe_id)
        return removed

    async def list_by_meal_type(self, meal_type: MealType) -> List[Recipe]:
        return await self.store.list_recipes(meal_type=meal_type)

    async def list(self) -> List[Recipe]:
        return await self.store.list_recipes()


class InventoryService:
    """Ingredient stock keyed by exact name.

    Adding a name that is already stocked merges quantities. Removing deducts
    from the stored quantity and never lets it go below zero.
    """

    def __init__(self, store: SqliteStore):
        self.store = store

    async def list(self) -> List[Ingredient]:
        return await self.store.list_inventory()

    async def add(self, payload: IngredientPayload) -> Ingredient:
        async with self.store.inventory_lock:
            existing = await self.store.get_inventory_item(payload.name)
            if existing is not None:
                item = existing.model_copy(update={"quantity": existing.quantity + payload.quantity})
            else:
                item = Ingredient(
                    id=await self.store.next_id(INGREDIENT_COUNTER),
                    name=payload.name,
                    quantity=payload.quantity,
                    unit=payload.unit,
                )
            await self.store.put_inventory_item(item)
        logger.info("ingredient_stocked name=%s quantity=%s", item.name, item.quantity)
        return item

    async def remove(self, name: str, quantity: Decimal) -> Ingredient:
        """Deduct ``quantity`` of ``name`` and return a record of the amount removed."""
        # Negative or non-finite amounts raise pydantic.ValidationError (a ValueError)
        quantity = _quantity.validate_python(quantity)
        async with self.store.inventory_lock:
            existing = await self.store.get_inventory_item(name)
            if existing is None:
                logger.warning("ingredient_remove_rejected name=%s reason=absent", name)
                raise IngredientNotFound(f"Ingredient '{name}' not found in inventory")
            if existing.quantity < quantity:
                logger.warning(
                    "ingredient_remove_rejected name=%s reason=insufficient on_hand=%s requested=%s",
                    name, existing.quantity, quantity,
                )
                raise InsufficientQuantity(f"Insufficient quantity of '{name}' in inventory")
            await self.store.put_inventory_item(
                existing.model_copy(update={"quantity": existing.quantity - quantity})
            )
        logger.info("ingredient_removed name=%s quantity=%s", name, quantity)
        return existing.model_copy(update={"quantity": quantity})
