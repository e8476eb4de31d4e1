"""
Tests for transactional restaurant writes and lookup links.
"""
import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError

from places.models import Cuisine, Restaurant, Tag, restaurant_cuisines, restaurant_tags
from places.services import association_writer
from places.services.association_writer import (
    clean_names,
    create_restaurant,
    delete_restaurant,
    ensure_lookup,
    rewrite_associations,
    update_restaurant,
)
from places.services.categories import CUISINES, TAGS
from places.services.errors import RestaurantNotFoundError, RestaurantValidationError, StorageError
from places.services.restaurant_query import get_restaurant


async def count(db, table_or_model) -> int:
    result = await db.execute(select(func.count()).select_from(table_or_model))
    return result.scalar()


async def failing_ensure_lookup(db, category, name):
    """Tag lookups fail the way a locked database does; other categories work"""
    if category is TAGS:
        raise OperationalError("INSERT INTO tags", {}, Exception("database is locked"))
    return await ensure_lookup(db, category, name)


def test_clean_names():
    assert clean_names([" Italian", "Italian ", "", "  ", "Thai"]) == ["Italian", "Thai"]
    assert clean_names(None) == []


async def test_ensure_lookup_reuses_row(db_session):
    first = await ensure_lookup(db_session, CUISINES, "Korean")
    second = await ensure_lookup(db_session, CUISINES, "Korean")
    assert first == second
    assert await count(db_session, Cuisine) == 1


async def test_ensure_lookup_exact_name(db_session):
    korean = await ensure_lookup(db_session, CUISINES, "Korean")
    korean_bbq = await ensure_lookup(db_session, CUISINES, "Korean BBQ")
    assert korean != korean_bbq


async def test_new_tag_gets_default_color(db_session):
    await ensure_lookup(db_session, TAGS, "late night")
    result = await db_session.execute(select(Tag.color).where(Tag.name == "late night"))
    assert result.scalar_one() == "#6B7280"


async def test_create_duplicates_link_once(db_session):
    restaurant_id = await create_restaurant(
        db_session, {"name": "Carbone"}, {"cuisines": ["Italian", "Italian"]}
    )
    assert await count(db_session, Cuisine) == 1
    assert await count(db_session, restaurant_cuisines) == 1

    data = await get_restaurant(db_session, restaurant_id)
    assert data["cuisines"] == ["Italian"]


async def test_create_defaults(db_session):
    restaurant_id = await create_restaurant(db_session, {"name": "Defaults"}, {})
    restaurant = await db_session.get(Restaurant, restaurant_id)
    assert restaurant.status == "Unvisited"
    assert restaurant.liked is False
    assert restaurant.has_happy_hour is False
    assert restaurant.created_at is not None


async def test_create_derives_has_happy_hour(db_session):
    restaurant_id = await create_restaurant(
        db_session, {"name": "Dive", "happy_hour": "4-7pm daily"}, {}
    )
    restaurant = await db_session.get(Restaurant, restaurant_id)
    assert restaurant.has_happy_hour is True


async def test_create_explicit_has_happy_hour_wins(db_session):
    restaurant_id = await create_restaurant(
        db_session, {"name": "Dive", "happy_hour": "ended in 2019", "has_happy_hour": False}, {}
    )
    restaurant = await db_session.get(Restaurant, restaurant_id)
    assert restaurant.has_happy_hour is False


async def test_create_blank_name(db_session):
    with pytest.raises(RestaurantValidationError, match="Restaurant name is required"):
        await create_restaurant(db_session, {"name": "   "}, {"cuisines": ["Thai"]})
    assert await count(db_session, Restaurant) == 0
    assert await count(db_session, Cuisine) == 0


async def test_rewrite_empty_clears(db_session):
    restaurant_id = await create_restaurant(
        db_session, {"name": "Thai Diner"}, {"cuisines": ["Thai"], "tags": ["brunch"]}
    )
    linked = await rewrite_associations(db_session, restaurant_id, TAGS, [])
    await db_session.commit()

    assert linked == []
    assert await count(db_session, restaurant_tags) == 0
    assert await count(db_session, restaurant_cuisines) == 1
    # The lookup row itself is kept
    assert await count(db_session, Tag) == 1


async def test_update_only_present_categories(db_session, seed_data):
    restaurant_id = seed_data["thai_diner"]
    await update_restaurant(db_session, restaurant_id, {}, {"tags": []})

    data = await get_restaurant(db_session, restaurant_id)
    assert data["tags"] == []
    assert sorted(data["cuisines"]) == ["Diner", "Thai"]
    assert data["types"] == ["Restaurant"]
    assert data["neighborhoods"] == ["Nolita"]


async def test_update_keeps_omitted_fields(db_session, seed_data):
    restaurant_id = seed_data["via_carota"]
    await update_restaurant(db_session, restaurant_id, {"liked": True}, {})

    data = await get_restaurant(db_session, restaurant_id)
    assert data["liked"] is True
    assert data["status"] == "Visited"
    assert data["notes"] == "Great negroni at the bar"
    assert data["borough"] == "Manhattan"


async def test_update_applies_explicit_empty_string(db_session, seed_data):
    restaurant_id = seed_data["via_carota"]
    await update_restaurant(db_session, restaurant_id, {"notes": ""}, {})

    data = await get_restaurant(db_session, restaurant_id)
    assert data["notes"] == ""


async def test_update_trims_name(db_session, seed_data):
    restaurant_id = seed_data["dante"]
    await update_restaurant(db_session, restaurant_id, {"name": "  Dante NYC "}, {})

    data = await get_restaurant(db_session, restaurant_id)
    assert data["name"] == "Dante NYC"


async def test_update_no_fields(db_session, seed_data):
    with pytest.raises(RestaurantValidationError, match="No valid fields to update"):
        await update_restaurant(db_session, seed_data["lucali"], {}, {})


async def test_update_blank_name(db_session, seed_data):
    with pytest.raises(RestaurantValidationError, match="Restaurant name cannot be empty"):
        await update_restaurant(db_session, seed_data["lucali"], {"name": ""}, {})


async def test_update_missing_restaurant(db_session):
    with pytest.raises(RestaurantNotFoundError):
        await update_restaurant(db_session, 404, {"status": "Visited"}, {"cuisines": ["Thai"]})
    assert await count(db_session, Cuisine) == 0


async def test_update_failure_rolls_back_everything(db_session, seed_data, monkeypatch):
    restaurant_id = seed_data["thai_diner"]
    monkeypatch.setattr(association_writer, "ensure_lookup", failing_ensure_lookup)

    with pytest.raises(StorageError, match="database is locked"):
        await update_restaurant(
            db_session, restaurant_id, {"notes": "changed"}, {"cuisines": ["Korean"], "tags": ["late"]}
        )

    data = await get_restaurant(db_session, restaurant_id)
    assert data["notes"] is None
    assert sorted(data["cuisines"]) == ["Diner", "Thai"]
    assert data["tags"] == [{"name": "brunch", "color": "#6B7280"}]
    assert await count(db_session, Cuisine) == 3
    assert await count(db_session, Tag) == 1


async def test_create_failure_leaves_no_row(db_session, monkeypatch):
    monkeypatch.setattr(association_writer, "ensure_lookup", failing_ensure_lookup)

    with pytest.raises(StorageError):
        await create_restaurant(
            db_session, {"name": "Half Written"}, {"cuisines": ["Korean"], "tags": ["late"]}
        )

    assert await count(db_session, Restaurant) == 0
    assert await count(db_session, Cuisine) == 0
    assert await count(db_session, restaurant_cuisines) == 0


async def test_delete_removes_links_only(db_session, seed_data):
    restaurant_id = seed_data["lucali"]
    await delete_restaurant(db_session, restaurant_id)

    result = await db_session.execute(
        select(func.count()).select_from(restaurant_cuisines)
        .where(restaurant_cuisines.c.restaurant_id == restaurant_id)
    )
    assert result.scalar() == 0
    assert await count(db_session, Restaurant) == 3
    assert await count(db_session, Cuisine) == 3


async def test_delete_missing_restaurant(db_session, seed_data):
    links_before = await count(db_session, restaurant_cuisines)
    with pytest.raises(RestaurantNotFoundError):
        await delete_restaurant(db_session, 404)
    assert await count(db_session, restaurant_cuisines) == links_before
    assert await count(db_session, Restaurant) == 4
