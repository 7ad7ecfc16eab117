import os

# Keep module-level catalogs (server.py, api.py) off the real data directory
os.environ.setdefault("RECIPE_DB_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio

from smart_recipe.catalog import Catalog
from smart_recipe.models import Ingredient, MealType, RecipePayload


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{(tmp_path / 'recipes.db').as_posix()}"


@pytest_asyncio.fixture
async def catalog(db_url):
    cat = Catalog(db_url)
    await cat.open()
    yield cat
    await cat.close()


def make_payload(name="Pancakes", meal_type=MealType.BREAKFAST, ingredients=None):
    if ingredients is None:
        ingredients = [("Flour", 200, "g"), ("Milk", 300, "ml")]
    return RecipePayload(
        name=name,
        ingredients=[Ingredient(name=n, quantity=q, unit=u) for n, q, u in ingredients],
        instructions=["Mix", "Fry"],
        nutritional_info=["350 kcal"],
        meal_type=meal_type,
    )
