"""
Stats API - headline counts for the app header
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from places.database import get_db
from places.models.restaurant import Restaurant
from places.models.lookup import Cuisine, RestaurantType, Neighborhood, Tag

router = APIRouter()

STAT_QUERIES = {
    "total_restaurants": select(func.count(Restaurant.id)),
    "visited_restaurants": select(func.count(Restaurant.id)).where(Restaurant.status == "Visited"),
    "liked_restaurants": select(func.count(Restaurant.id)).where(Restaurant.liked == True),
    "happy_hour_restaurants": select(func.count(Restaurant.id)).where(Restaurant.has_happy_hour == True),
    "total_cuisines": select(func.count(Cuisine.id)),
    "total_types": select(func.count(RestaurantType.id)),
    "total_neighborhoods": select(func.count(Neighborhood.id)),
    "total_tags": select(func.count(Tag.id)),
}


@router.get("")
async def get_stats(db: AsyncSession = Depends(get_db)):
    stats = {}
    for key, query in STAT_QUERIES.items():
        result = await db.execute(query)
        stats[key] = result.scalar() or 0
    return stats
