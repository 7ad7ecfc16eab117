from __future__ import annotations
import asyncio
import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, async_sessionmaker
from sqlalchemy import text
from .models import Recipe, Ingredient, MealType

logger = logging.getLogger(__name__)

RECIPE_COUNTER = "recipe_id"
INGREDIENT_COUNTER = "ingredient_id"


class SqliteStore:
    """Durable state of the catalog: recipe map, inventory map and id counters.

    Each collection has its own lock. Single statements here are atomic on
    their own; callers that read, modify and write back hold the lock of the
    collection they touch for the whole sequence.
    """

    def __init__(self, db_url: str):
        self.engine: AsyncEngine = create_async_engine(db_url, future=True)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)
        self.recipes_lock = asyncio.Lock()
        self.inventory_lock = asyncio.Lock()

    async def init(self) -> None:
        async with self.engine.begin() as conn:
            await conn.execute(text("""
                CREATE TABLE IF NOT EXISTS recipes (
                    id INTEGER PRIMARY KEY,
                    meal_type TEXT NOT NULL,
                    recipe_json TEXT NOT NULL
                )
            """))
            await conn.execute(text("""
                CREATE TABLE IF NOT EXISTS inventory (
                    name TEXT PRIMARY KEY,
                    item_json TEXT NOT NULL
                )
            """))
            await conn.execute(text("""
                CREATE TABLE IF NOT EXISTS counters (
                    name TEXT PRIMARY KEY,
                    value INTEGER NOT NULL
                )
            """))

    async def close(self) -> None:
        await self.engine.dispose()

    # --- id allocation ---
    async def next_id(self, counter: str) -> int:
        """Hand out the current value of ``counter`` and persist value + 1.

        Counters start at 0. The increment is committed before returning.
        """
        async with self.session_factory() as s:
            res = await s.execute(text("SELECT value FROM counters WHERE name=:name"), {"name": counter})
            row = res.first()
            current = row[0] if row else 0
            await s.execute(
                text("INSERT OR REPLACE INTO counters (name, value) VALUES (:name, :value)"),
                {"name": counter, "value": current + 1},
            )
            await s.commit()
        logger.debug("id_allocated counter=%s id=%s", counter, current)
        return current

    # --- recipes ---
    async def put_recipe(self, recipe: Recipe) -> None:
        async with self.session_factory() as s:
            await s.execute(
                text("INSERT OR REPLACE INTO recipes (id, meal_type, recipe_json) VALUES (:id, :meal_type, :json)"),
                {"id": recipe.id, "meal_type": recipe.meal_type.value, "json": recipe.model_dump_json()},
            )
            await s.commit()

    async def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        async with self.session_factory() as s:
            res = await s.execute(text("SELECT recipe_json FROM recipes WHERE id=:id"), {"id": recipe_id})
            row = res.first()
        if not row:
            return None
        return Recipe.model_validate_json(row[0])

    async def delete_recipe(self, recipe_id: int) -> Optional[Recipe]:
        """Remove a recipe and return what was stored, or None if nothing was."""
        async with self.session_factory() as s:
            res = await s.execute(text("SELECT recipe_json FROM recipes WHERE id=:id"), {"id": recipe_id})
            row = res.first()
            if not row:
                return None
            await s.execute(text("DELETE FROM recipes WHERE id=:id"), {"id": recipe_id})
            await s.commit()
        return Recipe.model_validate_json(row[0])

    async def list_recipes(self, meal_type: Optional[MealType] = None) -> List[Recipe]:
        # Ascending id is the natural order of the map
        if meal_type is None:
            sql = "SELECT recipe_json FROM recipes ORDER BY id"
            params: dict = {}
        else:
            sql = "SELECT recipe_json FROM recipes WHERE meal_type=:meal_type ORDER BY id"
            params = {"meal_type": meal_type.value}
        async with self.session_factory() as s:
            res = await s.execute(text(sql), params)
            rows = res.all()
        return [Recipe.model_validate_json(r[0]) for r in rows]

    # --- inventory ---
    async def list_inventory(self) -> List[Ingredient]:
        async with self.session_factory() as s:
            res = await s.execute(text("SELECT item_json FROM inventory ORDER BY name"))
            rows = res.all()
        return [Ingredient.model_validate_json(r[0]) for r in rows]

    async def get_inventory_item(self, name: str) -> Optional[Ingredient]:
        async with self.session_factory() as s:
            res = await s.execute(text("SELECT item_json FROM inventory WHERE name=:name"), {"name": name})
            row = res.first()
        if not row:
            return None
        return Ingredient.model_validate_json(row[0])

    async def put_inventory_item(self, item: Ingredient) -> None:
        # Names are matched exactly, no case folding
        async with self.session_factory() as s:
            await s.execute(
                text("INSERT OR REPLACE INTO inventory (name, item_json) VALUES (:name, :json)"),
                {"name": item.name, "json": item.model_dump_json()},
            )
            await s.commit()
