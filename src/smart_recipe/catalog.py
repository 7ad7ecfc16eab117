from __future__ import annotations
import logging
from .reconciler import ShoppingListReconciler
from .services import RecipeService, InventoryService
from .storage import SqliteStore

logger = logging.getLogger(__name__)


class Catalog:
    """Owns the store and the services built on it.

    Adapters (MCP tools, HTTP routes) hold one Catalog and go through its
    services; nothing else touches the store.
    """

    def __init__(self, db_url: str):
        self.db_url = db_url
        self.store = SqliteStore(db_url)
        self.recipes = RecipeService(self.store)
        self.inventory = InventoryService(self.store)
        self.shopping = ShoppingListReconciler(self.recipes, self.inventory)

    async def open(self) -> None:
        await self.store.init()
        logger.info("catalog_opened url=%s", self.store.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        await self.store.close()
