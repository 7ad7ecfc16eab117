from __future__ import annotations
import asyncio
from typing import List
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from .catalog import Catalog
from .config import configure_logging, db_url
from .errors import NotFoundError
from .models import Recipe, RecipePayload, Ingredient, IngredientPayload, MealType, Quantity, ShoppingList

catalog = Catalog(db_url())

mcp = FastMCP("smart-recipe")


@mcp.tool()
async def add_recipe(recipe: RecipePayload) -> Recipe:
    """
    Store a new recipe and return it with its assigned id.

    This is a WRITE operation.

    Args:
      recipe: RecipePayload containing:
        - name (required)
        - ingredients: list of {name, quantity, unit}; copied as-is into the recipe
        - instructions: ordered list of steps
        - nutritional_info: list of free-text facts, e.g. "320 kcal"
        - meal_type (required): one of Breakfast, Lunch, Dinner, Snack, Desserts

    Returns:
      The stored Recipe. `id` and `created_at` are assigned by the server;
      `updated_at` is null until the first update.

    Notes:
      - Ids increase with every new recipe and are never reused, even after deletion.
      - Later changes to the inventory do not affect the ingredients saved here.
    """
    return await catalog.recipes.add(recipe)


@mcp.tool()
async def update_recipe(recipe_id: int, recipe: RecipePayload) -> Recipe:
    """
    Replace the contents of an existing recipe.

    This is a WRITE operation. Name, ingredients, instructions, nutritional_info and
    meal_type are all taken from `recipe`; fields left out are reset to their defaults.

    Returns:
      The updated Recipe. `id` and `created_at` are unchanged, `updated_at` is set to now.

    Errors:
      Fails if no recipe exists with that id.
    """
    try:
        return await catalog.recipes.update(recipe_id, recipe)
    except NotFoundError as e:
        raise ToolError(e.msg) from e


@mcp.tool()
async def delete_recipe(recipe_id: int) -> Recipe:
    """
    Delete a recipe by id and return the record that was removed.

    This is a WRITE operation.

    Errors:
      Fails if no recipe exists with that id (including one already deleted).
    """
    try:
        return await catalog.recipes.delete(recipe_id)
    except NotFoundError as e:
        raise ToolError(e.msg) from e


@mcp.tool()
async def search_recipe(recipe_id: int) -> Recipe:
    """
    Fetch a single recipe by id.

    This is a READ-ONLY operation.

    Errors:
      Fails if no recipe exists with that id.
    """
    try:
        return await catalog.recipes.get(recipe_id)
    except NotFoundError as e:
        raise ToolError(e.msg) from e


@mcp.tool()
async def search_recipe_by_meal_type(meal_type: MealType) -> List[Recipe]:
    """
    List every stored recipe of the given meal type, ordered by id.

    This is a READ-ONLY operation.

    Args:
      meal_type: one of Breakfast, Lunch, Dinner, Snack, Desserts.

    Returns:
      A list of Recipe objects (possibly empty).
    """
    return await catalog.recipes.list_by_meal_type(meal_type)


@mcp.tool()
async def list_recipes() -> List[Recipe]:
    """
    List every stored recipe, ordered by id.

    This is a READ-ONLY operation.
    """
    return await catalog.recipes.list()


@mcp.tool()
async def view_inventory() -> List[Ingredient]:
    """
    List every ingredient currently in the inventory.

    This is a READ-ONLY operation. Use it before suggesting recipes or
    building a shopping list.

    Returns:
      A list of Ingredient objects ({id, name, quantity, unit}). Empty if nothing is stocked.

    Notes:
      - Names are matched exactly, case included ("Flour" and "flour" are different items).
    """
    return await catalog.inventory.list()


@mcp.tool()
async def add_ingredient_to_inventory(ingredient: IngredientPayload) -> Ingredient:
    """
    Add stock for an ingredient.

    This is a WRITE operation.

    Args:
      ingredient: IngredientPayload containing:
        - name (required): exact ingredient name, e.g. "Flour"
        - quantity (required): non-negative number
        - unit (optional): e.g. "g", "ml", "cans"

    Returns:
      The inventory entry after the change.

    Side effects:
      - If the name is already stocked, the quantity is added to the existing amount
        (the existing unit is kept).
      - Otherwise a new entry is created.
    """
    return await catalog.inventory.add(ingredient)


@mcp.tool()
async def remove_ingredient_from_inventory(ingredient_name: str, quantity: Quantity) -> Ingredient:
    """
    Take a quantity of an ingredient out of the inventory.

    This is a WRITE operation.

    Args:
      ingredient_name: exact name of the stocked ingredient.
      quantity: amount to remove (non-negative).

    Returns:
      An Ingredient describing the amount removed. The remainder stays in the
      inventory, even when it reaches zero.

    Errors:
      Fails if the ingredient is not stocked or if less than `quantity` is on hand.
      Nothing is changed in either case.
    """
    try:
        return await catalog.inventory.remove(ingredient_name, quantity)
    except NotFoundError as e:
        raise ToolError(e.msg) from e


@mcp.tool()
async def generate_shopping_list(recipe_ids: List[int]) -> ShoppingList:
    """
    Work out what to buy to cook the given recipes with the current inventory.

    This is a READ-ONLY operation (the inventory is not changed).

    Args:
      recipe_ids: recipe ids to cook. Repeat an id to cook that recipe more than once.

    Returns:
      ShoppingList with:
        - items: one Ingredient per missing ingredient, quantity = amount still needed
        - missing_recipe_ids: requested ids that do not exist (the rest are still counted)
        - sufficient: true when nothing needs buying and every id was found

    Notes:
      - Quantities are compared by ingredient name only; units are not converted.
    """
    return await catalog.shopping.generate(recipe_ids)


async def _prepare() -> None:
    await catalog.open()
    # Drop pooled connections bound to this loop; mcp.run() starts its own
    await catalog.close()


def main() -> None:
    configure_logging()
    # Ensure DB schema exists before serving
    asyncio.run(_prepare())
    mcp.run()  # stdio transport; logs go to stderr


if __name__ == "__main__":
    main()
