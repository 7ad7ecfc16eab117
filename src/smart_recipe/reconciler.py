"""
Shopping list reconciliation.

The required quantity of every ingredient is summed across the requested
recipes (a recipe requested twice counts twice) and compared with what the
inventory holds under the same name. Units are carried along as labels only;
no conversion is attempted.
"""
from __future__ import annotations
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence
from .errors import RecipeNotFound
from .models import Ingredient, Recipe, ShoppingList
from .services import RecipeService, InventoryService

logger = logging.getLogger(__name__)


def compute_shortfall(recipes: Iterable[Recipe], inventory: Iterable[Ingredient]) -> List[Ingredient]:
    """Return one entry per ingredient whose on-hand quantity falls short.

    Entries keep the order in which ingredient names were first required and
    carry the missing amount (required - on hand). Fully stocked ingredients
    are left out, so an empty list means everything is covered.
    """
    required: Dict[str, Decimal] = {}
    units: Dict[str, str] = {}
    for recipe in recipes:
        for ing in recipe.ingredients:
            required[ing.name] = required.get(ing.name, Decimal(0)) + ing.quantity
            units.setdefault(ing.name, ing.unit)

    on_hand = {item.name: item.quantity for item in inventory}

    shortfall: List[Ingredient] = []
    for name, needed in required.items():
        have = on_hand.get(name, Decimal(0))
        if have < needed:
            shortfall.append(Ingredient(name=name, quantity=needed - have, unit=units[name]))
    return shortfall


class ShoppingListReconciler:
    def __init__(self, recipes: RecipeService, inventory: InventoryService):
        self.recipes = recipes
        self.inventory = inventory

    async def generate(self, recipe_ids: Sequence[int]) -> ShoppingList:
        resolved: List[Recipe] = []
        missing: List[int] = []
        for rid in recipe_ids:
            try:
                resolved.append(await self.recipes.get(rid))
            except RecipeNotFound:
                missing.append(rid)

        if missing:
            logger.warning("shopping_list_missing_recipes ids=%s", missing)

        items = compute_shortfall(resolved, await self.inventory.list())
        logger.info("shopping_list_generated recipes=%d items=%d", len(resolved), len(items))
        return ShoppingList(
            items=items,
            missing_recipe_ids=missing,
            sufficient=not items and not missing,
        )
