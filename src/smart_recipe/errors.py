from __future__ import annotations


class NotFoundError(Exception):
    """Lookup or removal that could not be satisfied. ``msg`` is shown to callers."""

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg


class RecipeNotFound(NotFoundError):
    pass


class IngredientNotFound(NotFoundError):
    pass


class InsufficientQuantity(NotFoundError):
    # Reported as a NotFound kind; the subclass lets callers tell it apart.
    pass
