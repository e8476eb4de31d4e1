"""
Restaurant writes - create, partial update and delete, each in a single
transaction together with the restaurant's cuisine/type/neighborhood/tag links
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from places.models.restaurant import Restaurant
from places.services.categories import CATEGORIES, CATEGORY_BY_KEY, Category
from places.services.errors import (
    RestaurantNotFoundError,
    RestaurantValidationError,
    StorageError,
)
from places.utils.logger import get_logger
from places.utils.validators import validate_restaurant_name

logger = get_logger(__name__)

BOOLEAN_FIELDS = ("liked", "has_happy_hour")


def clean_names(names: Optional[Iterable[str]]) -> List[str]:
    """Trim, drop blanks and repeats, keep first-seen order."""
    cleaned: List[str] = []
    for name in names or []:
        name = (name or "").strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


async def ensure_lookup(db: AsyncSession, category: Category, name: str) -> int:
    """Insert-or-ignore the lookup row by exact name and return its id."""
    await db.execute(
        insert(category.model).values(name=name).on_conflict_do_nothing(index_elements=["name"])
    )
    result = await db.execute(select(category.model.id).where(category.model.name == name))
    return result.scalar_one()


async def rewrite_associations(
    db: AsyncSession,
    restaurant_id: int,
    category: Category,
    names: Optional[Iterable[str]],
) -> List[str]:
    """Make the restaurant's links in ``category`` exactly ``names``. Empty clears them."""
    await db.execute(delete(category.link_table).where(category.restaurant_fk == restaurant_id))

    linked = clean_names(names)
    for name in linked:
        lookup_id = await ensure_lookup(db, category, name)
        await db.execute(
            insert(category.link_table)
            .values({category.restaurant_fk.name: restaurant_id, category.link_column: lookup_id})
            .on_conflict_do_nothing()
        )
    return linked


def _coerce_booleans(fields: Dict) -> Dict:
    for key in BOOLEAN_FIELDS:
        if key in fields:
            fields[key] = bool(fields[key])
    return fields


async def create_restaurant(
    db: AsyncSession,
    fields: Dict,
    associations: Dict[str, List[str]],
) -> int:
    """Insert a restaurant and its links; returns the new id."""
    fields = dict(fields)
    try:
        fields["name"] = validate_restaurant_name(fields.get("name"))
    except ValueError as e:
        raise RestaurantValidationError("Restaurant name is required") from e

    if fields.get("status") is None:
        fields["status"] = "Unvisited"
    if fields.get("liked") is None:
        fields["liked"] = False
    if fields.get("has_happy_hour") is None:
        fields["has_happy_hour"] = bool(
            (fields.get("happy_hour") or "").strip() or fields.get("happy_hour_data")
        )
    _coerce_booleans(fields)

    try:
        restaurant = Restaurant(**fields)
        db.add(restaurant)
        await db.flush()
        for category in CATEGORIES:
            await rewrite_associations(db, restaurant.id, category, associations.get(category.key))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to create restaurant {fields['name']!r}: {e}")
        raise StorageError(str(e)) from e

    logger.info(f"Created restaurant {restaurant.id} ({restaurant.name})")
    return restaurant.id


async def update_restaurant(
    db: AsyncSession,
    restaurant_id: int,
    fields: Dict,
    associations: Dict[str, List[str]],
) -> None:
    """
    Partial update. Only keys present in ``fields`` change; only categories
    present in ``associations`` are rewritten. An explicit empty list clears
    that category.
    """
    if not fields and not associations:
        raise RestaurantValidationError("No valid fields to update")

    fields = _coerce_booleans(dict(fields))
    if "name" in fields:
        try:
            fields["name"] = validate_restaurant_name(fields["name"])
        except ValueError as e:
            raise RestaurantValidationError("Restaurant name cannot be empty") from e

    try:
        restaurant = await db.get(Restaurant, restaurant_id)
        if restaurant is None:
            await db.rollback()
            raise RestaurantNotFoundError(restaurant_id)

        for key, value in fields.items():
            setattr(restaurant, key, value)
        restaurant.updated_at = datetime.utcnow()
        await db.flush()

        for key, names in associations.items():
            await rewrite_associations(db, restaurant_id, CATEGORY_BY_KEY[key], names)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to update restaurant {restaurant_id}: {e}")
        raise StorageError(str(e)) from e

    logger.info(f"Updated restaurant {restaurant_id} (fields={sorted(fields)}, links={sorted(associations)})")


async def delete_restaurant(db: AsyncSession, restaurant_id: int) -> None:
    """Remove the restaurant's links in every category, then the restaurant."""
    try:
        for category in CATEGORIES:
            await db.execute(delete(category.link_table).where(category.restaurant_fk == restaurant_id))
        result = await db.execute(delete(Restaurant).where(Restaurant.id == restaurant_id))
        if result.rowcount == 0:
            await db.rollback()
            raise RestaurantNotFoundError(restaurant_id)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to delete restaurant {restaurant_id}: {e}")
        raise StorageError(str(e)) from e

    logger.info(f"Deleted restaurant {restaurant_id}")
