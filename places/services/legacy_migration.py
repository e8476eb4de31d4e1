"""
One-shot reshaping of legacy free-text columns:
- restaurants.neighborhood text -> normalized neighborhood links
- restaurants.happy_hour text + start/end columns -> happy_hour_data schedules

Both are idempotent: rows that already carry the normalized form are skipped.
"""
import re
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import List

from sqlalchemy import distinct, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from places.models.restaurant import Restaurant
from places.services.association_writer import rewrite_associations
from places.services.categories import NEIGHBORHOODS
from places.services.errors import StorageError
from places.services.happy_hour import build_schedule
from places.utils.logger import get_logger

logger = get_logger(__name__)

NEIGHBORHOOD_SEPARATORS = re.compile(r"\s*[,/;&]\s*")


@dataclass(frozen=True)
class MigrationSummary:
    processed: int = 0
    migrated: int = 0
    skipped: int = 0

    def tally(self, migrated: bool) -> "MigrationSummary":
        return MigrationSummary(
            processed=self.processed + 1,
            migrated=self.migrated + int(migrated),
            skipped=self.skipped + int(not migrated),
        )

    def to_dict(self) -> dict:
        return asdict(self)


def split_legacy_neighborhoods(text: str) -> List[str]:
    """'East Village / LES, NoHo' -> ['East Village', 'LES', 'NoHo']"""
    return [part for part in NEIGHBORHOOD_SEPARATORS.split((text or "").strip()) if part]


async def migrate_neighborhoods(db: AsyncSession) -> MigrationSummary:
    try:
        result = await db.execute(
            select(Restaurant)
            .where(Restaurant.neighborhood.isnot(None), Restaurant.neighborhood != "")
            .order_by(Restaurant.id)
        )
        restaurants = result.scalars().all()

        result = await db.execute(select(distinct(NEIGHBORHOODS.restaurant_fk)))
        already_linked = set(result.scalars().all())

        summary = MigrationSummary()
        for restaurant in restaurants:
            names = split_legacy_neighborhoods(restaurant.neighborhood)
            if restaurant.id in already_linked or not names:
                summary = summary.tally(False)
                continue
            await rewrite_associations(db, restaurant.id, NEIGHBORHOODS, names)
            summary = summary.tally(True)

        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Neighborhood migration failed: {e}")
        raise StorageError(str(e)) from e

    logger.info(f"Neighborhood migration: {summary.to_dict()}")
    return summary


def _has_legacy_happy_hour(restaurant: Restaurant) -> bool:
    return any(
        (value or "").strip()
        for value in (
            restaurant.happy_hour,
            restaurant.happy_hour_start_time,
            restaurant.happy_hour_end_time,
        )
    )


async def migrate_happy_hours(db: AsyncSession) -> MigrationSummary:
    try:
        result = await db.execute(
            select(Restaurant)
            .where(Restaurant.happy_hour_data.is_(None))
            .order_by(Restaurant.id)
        )
        restaurants = result.scalars().all()

        summary = MigrationSummary()
        now = datetime.utcnow()
        for restaurant in restaurants:
            if not _has_legacy_happy_hour(restaurant):
                summary = summary.tally(False)
                continue
            restaurant.happy_hour_data = [
                build_schedule(
                    restaurant.happy_hour,
                    restaurant.happy_hour_start_time,
                    restaurant.happy_hour_end_time,
                )
            ]
            restaurant.has_happy_hour = True
            restaurant.updated_at = now
            summary = summary.tally(True)

        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Happy hour migration failed: {e}")
        raise StorageError(str(e)) from e

    logger.info(f"Happy hour migration: {summary.to_dict()}")
    return summary
