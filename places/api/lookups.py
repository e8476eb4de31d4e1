"""
Lookup API endpoints - cuisines, types, tags, neighborhoods and boroughs
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, distinct
from typing import List, Optional
from pydantic import BaseModel

from places.database import get_db
from places.models.restaurant import Restaurant
from places.models.lookup import Cuisine, RestaurantType, Neighborhood, Tag

router = APIRouter()


class LookupResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class TagResponse(LookupResponse):
    color: Optional[str]


@router.get("/cuisines", response_model=List[LookupResponse])
async def list_cuisines(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Cuisine).order_by(Cuisine.name))
    return result.scalars().all()


@router.get("/types", response_model=List[LookupResponse])
async def list_types(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(RestaurantType).order_by(RestaurantType.name))
    return result.scalars().all()


@router.get("/tags", response_model=List[TagResponse])
async def list_tags(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Tag).order_by(Tag.name))
    return result.scalars().all()


@router.get("/neighborhoods", response_model=List[str])
async def list_neighborhoods(db: AsyncSession = Depends(get_db)):
    """Neighborhood names only"""
    result = await db.execute(select(Neighborhood.name).order_by(Neighborhood.name))
    return result.scalars().all()


@router.get("/boroughs", response_model=List[str])
async def list_boroughs(db: AsyncSession = Depends(get_db)):
    """Distinct boroughs currently in use"""
    result = await db.execute(
        select(distinct(Restaurant.borough))
        .where(Restaurant.borough.isnot(None), Restaurant.borough != "")
        .order_by(Restaurant.borough)
    )
    return result.scalars().all()
