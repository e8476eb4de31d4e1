"""
Maintenance API - run-once reshaping of legacy neighborhood / happy hour text
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from places.database import get_db
from places.services import legacy_migration
from places.services.errors import StorageError

router = APIRouter()


@router.post("/migrate-neighborhoods")
async def migrate_neighborhoods(db: AsyncSession = Depends(get_db)):
    """Link each restaurant's legacy neighborhood text to normalized neighborhoods"""
    try:
        summary = await legacy_migration.migrate_neighborhoods(db)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return summary.to_dict()


@router.post("/migrate-happy-hours")
async def migrate_happy_hours(db: AsyncSession = Depends(get_db)):
    """Build structured happy_hour_data from legacy happy hour text and times"""
    try:
        summary = await legacy_migration.migrate_happy_hours(db)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return summary.to_dict()
