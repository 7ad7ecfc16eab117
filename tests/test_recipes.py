import asyncio

import pytest

from smart_recipe.errors import NotFoundError, RecipeNotFound
from smart_recipe.models import IngredientPayload, MealType

from conftest import make_payload


async def test_ids_are_unique_and_increasing(catalog):
    ids = [(await catalog.recipes.add(make_payload(name=f"R{i}"))).id for i in range(5)]
    assert ids == [0, 1, 2, 3, 4]


async def test_add_then_get_round_trip(catalog):
    added = await catalog.recipes.add(make_payload())
    assert added.updated_at is None
    assert added.created_at is not None
    assert await catalog.recipes.get(added.id) == added


async def test_add_copies_payload_fields(catalog):
    payload = make_payload()
    added = await catalog.recipes.add(payload)
    assert added.name == payload.name
    assert added.ingredients == payload.ingredients
    assert added.instructions == payload.instructions
    assert added.nutritional_info == payload.nutritional_info
    assert added.meal_type == payload.meal_type


async def test_get_missing_recipe(catalog):
    with pytest.raises(RecipeNotFound, match="id=42 not found"):
        await catalog.recipes.get(42)


async def test_update_preserves_identity(catalog):
    added = await catalog.recipes.add(make_payload())
    new = make_payload(name="Waffles", meal_type=MealType.SNACK, ingredients=[("Eggs", 2, "")])
    updated = await catalog.recipes.update(added.id, new)

    assert updated.id == added.id
    assert updated.created_at == added.created_at
    assert updated.updated_at >= updated.created_at
    assert updated.name == "Waffles"
    assert updated.meal_type == MealType.SNACK
    assert [i.name for i in updated.ingredients] == ["Eggs"]
    assert await catalog.recipes.get(added.id) == updated


async def test_update_missing_recipe(catalog):
    with pytest.raises(NotFoundError, match="Couldn't update a recipe with id=3"):
        await catalog.recipes.update(3, make_payload())


async def test_delete_is_final(catalog):
    added = await catalog.recipes.add(make_payload())
    removed = await catalog.recipes.delete(added.id)
    assert removed == added

    with pytest.raises(RecipeNotFound):
        await catalog.recipes.get(added.id)
    with pytest.raises(RecipeNotFound, match="Couldn't delete"):
        await catalog.recipes.delete(added.id)


async def test_ids_are_not_reused_after_delete(catalog):
    first = await catalog.recipes.add(make_payload())
    await catalog.recipes.delete(first.id)
    second = await catalog.recipes.add(make_payload())
    assert second.id > first.id


async def test_list_by_meal_type_filters_exactly(catalog):
    b1 = await catalog.recipes.add(make_payload(name="Oats", meal_type=MealType.BREAKFAST))
    await catalog.recipes.add(make_payload(name="Stew", meal_type=MealType.DINNER))
    b2 = await catalog.recipes.add(make_payload(name="Eggs", meal_type=MealType.BREAKFAST))

    breakfasts = await catalog.recipes.list_by_meal_type(MealType.BREAKFAST)
    assert [r.id for r in breakfasts] == [b1.id, b2.id]
    assert await catalog.recipes.list_by_meal_type(MealType.DESSERTS) == []


async def test_list_follows_updates_and_deletes(catalog):
    a = await catalog.recipes.add(make_payload(name="A", meal_type=MealType.LUNCH))
    b = await catalog.recipes.add(make_payload(name="B", meal_type=MealType.LUNCH))
    await catalog.recipes.update(a.id, make_payload(name="A", meal_type=MealType.DINNER))
    await catalog.recipes.delete(b.id)

    assert await catalog.recipes.list_by_meal_type(MealType.LUNCH) == []
    assert [r.name for r in await catalog.recipes.list()] == ["A"]


async def test_recipe_ingredients_do_not_follow_inventory(catalog):
    added = await catalog.recipes.add(make_payload(ingredients=[("Flour", 200, "g")]))
    await catalog.inventory.add(IngredientPayload(name="Flour", quantity=1000, unit="g"))
    stored = await catalog.recipes.get(added.id)
    assert stored.ingredients[0].quantity == 200
    assert stored.ingredients[0].id is None


async def test_concurrent_adds_get_distinct_ids(catalog):
    added = await asyncio.gather(*(catalog.recipes.add(make_payload(name=f"R{i}")) for i in range(20)))
    assert sorted(r.id for r in added) == list(range(20))
    assert len(await catalog.recipes.list()) == 20
