"""
HTTP API for the recipe catalog.
Exposes the same operations as the MCP server as JSON routes.
"""
from __future__ import annotations
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .catalog import Catalog
from .config import API_HOST, API_PORT, configure_logging, db_url
from .errors import NotFoundError
from .models import (
    Recipe, RecipePayload, Ingredient, IngredientPayload, MealType, Quantity, ShoppingList,
)


# --- Request bodies ---


class RemoveIngredientRequest(BaseModel):
    quantity: Quantity


class ShoppingListRequest(BaseModel):
    recipe_ids: List[int]


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def create_app(catalog: Catalog) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await catalog.open()
        yield
        await catalog.close()

    app = FastAPI(title="Smart Recipe API", lifespan=lifespan)
    app.state.catalog = catalog
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.msg})

    # --- Recipes ---

    @app.post("/recipes", response_model=Recipe)
    async def add_recipe(body: RecipePayload, catalog: Catalog = Depends(get_catalog)) -> Recipe:
        return await catalog.recipes.add(body)

    @app.get("/recipes", response_model=List[Recipe])
    async def list_recipes(
        meal_type: Optional[MealType] = None, catalog: Catalog = Depends(get_catalog)
    ) -> List[Recipe]:
        """All recipes by ascending id, or only those of `meal_type` when given."""
        if meal_type is None:
            return await catalog.recipes.list()
        return await catalog.recipes.list_by_meal_type(meal_type)

    @app.get("/recipes/{recipe_id}", response_model=Recipe)
    async def search_recipe(recipe_id: int, catalog: Catalog = Depends(get_catalog)) -> Recipe:
        return await catalog.recipes.get(recipe_id)

    @app.put("/recipes/{recipe_id}", response_model=Recipe)
    async def update_recipe(
        recipe_id: int, body: RecipePayload, catalog: Catalog = Depends(get_catalog)
    ) -> Recipe:
        return await catalog.recipes.update(recipe_id, body)

    @app.delete("/recipes/{recipe_id}", response_model=Recipe)
    async def delete_recipe(recipe_id: int, catalog: Catalog = Depends(get_catalog)) -> Recipe:
        return await catalog.recipes.delete(recipe_id)

    # --- Inventory ---

    @app.get("/inventory", response_model=List[Ingredient])
    async def view_inventory(catalog: Catalog = Depends(get_catalog)) -> List[Ingredient]:
        return await catalog.inventory.list()

    @app.post("/inventory", response_model=Ingredient)
    async def add_ingredient(body: IngredientPayload, catalog: Catalog = Depends(get_catalog)) -> Ingredient:
        return await catalog.inventory.add(body)

    @app.post("/inventory/{name}/remove", response_model=Ingredient)
    async def remove_ingredient(
        name: str, body: RemoveIngredientRequest, catalog: Catalog = Depends(get_catalog)
    ) -> Ingredient:
        return await catalog.inventory.remove(name, body.quantity)

    # --- Shopping list ---

    @app.post("/shopping-list", response_model=ShoppingList)
    async def generate_shopping_list(
        body: ShoppingListRequest, catalog: Catalog = Depends(get_catalog)
    ) -> ShoppingList:
        return await catalog.shopping.generate(body.recipe_ids)

    return app


app = create_app(Catalog(db_url()))


def main() -> None:
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    main()
