"""
Restaurant API endpoints - filtered listing, single fetch, create/update/delete
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Annotated, Any, Dict, List, Optional, Tuple
from datetime import datetime
from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from places.config import get_settings
from places.database import get_db
from places.services import association_writer, restaurant_query
from places.services.errors import (
    RestaurantNotFoundError,
    RestaurantValidationError,
    StorageError,
)
from places.utils.helpers import split_csv
from places.utils.validators import validate_schedule_days, validate_schedule_time

settings = get_settings()
router = APIRouter()

ASSOCIATION_KEYS = ("cuisines", "types", "neighborhoods", "tags")


# --- Pydantic Schemas ---

class HappyHourSchedule(BaseModel):
    days: List[str] = []
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    offer: Optional[str] = None

    @field_validator("days")
    @classmethod
    def validate_days(cls, v: List[str]) -> List[str]:
        return validate_schedule_days(v)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return validate_schedule_time(v)


class TagRef(BaseModel):
    name: str
    color: str


class RestaurantResponse(BaseModel):
    id: int
    name: str
    neighborhood: Optional[str]
    borough: Optional[str]
    status: Optional[str]
    liked: bool
    happy_hour: Optional[str]
    happy_hour_start_time: Optional[str]
    happy_hour_end_time: Optional[str]
    happy_hour_data: List[Dict[str, Any]] = []
    has_happy_hour: bool
    notes: Optional[str]
    what_to_order: Optional[str]
    website_link: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    cuisines: List[str] = []
    types: List[str] = []
    neighborhoods: List[str] = []
    tags: List[TagRef] = []


class RestaurantCreate(BaseModel):
    name: Optional[str] = None  # required, checked after trimming
    neighborhood: Optional[str] = None
    borough: Optional[str] = None
    status: Optional[str] = "Unvisited"
    liked: Optional[bool] = False
    happy_hour: Optional[str] = None
    happy_hour_start_time: Optional[str] = None
    happy_hour_end_time: Optional[str] = None
    happy_hour_data: Optional[List[HappyHourSchedule]] = None
    has_happy_hour: Optional[bool] = None
    notes: Optional[str] = None
    what_to_order: Optional[str] = None
    website_link: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    cuisines: List[str] = []
    types: List[str] = []
    neighborhoods: List[str] = []
    tags: List[str] = []


class RestaurantUpdate(BaseModel):
    name: Optional[str] = None
    neighborhood: Optional[str] = None
    borough: Optional[str] = None
    status: Optional[str] = None
    liked: Optional[bool] = None
    happy_hour: Optional[str] = None
    happy_hour_start_time: Optional[str] = None
    happy_hour_end_time: Optional[str] = None
    happy_hour_data: Optional[List[HappyHourSchedule]] = None
    has_happy_hour: Optional[bool] = None
    notes: Optional[str] = None
    what_to_order: Optional[str] = None
    website_link: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    cuisines: Optional[List[str]] = None
    types: Optional[List[str]] = None
    neighborhoods: Optional[List[str]] = None
    tags: Optional[List[str]] = None


# --- Helper ---

LIKED_ADAPTER = TypeAdapter(bool)
LIMIT_ADAPTER = TypeAdapter(Annotated[int, Field(ge=1)])
OFFSET_ADAPTER = TypeAdapter(Annotated[int, Field(ge=0)])


def _query_value(name: str, raw: Optional[str], adapter: TypeAdapter) -> Any:
    """Parse a query parameter; blank means not given, malformed is a 422"""
    if raw is None or not raw.strip():
        return None
    try:
        return adapter.validate_python(raw.strip())
    except ValidationError:
        raise HTTPException(status_code=422, detail=f"Invalid value for {name}: {raw!r}")


def _split_payload(payload: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, List[str]]]:
    """Separate scalar columns from association lists"""
    fields = {k: v for k, v in payload.items() if k not in ASSOCIATION_KEYS}
    associations = {k: v for k, v in payload.items() if k in ASSOCIATION_KEYS}
    return fields, associations


# --- Endpoints ---

@router.get("", response_model=List[RestaurantResponse])
async def list_restaurants(
    search: Optional[str] = None,
    cuisines: Optional[str] = None,
    types: Optional[str] = None,
    neighborhoods: Optional[str] = None,
    tags: Optional[str] = None,
    boroughs: Optional[str] = None,
    status: Optional[str] = None,
    liked: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    List restaurants. List filters are comma-separated; boroughs takes one borough.
    Blank parameters count as not given.
    """
    liked = _query_value("liked", liked, LIKED_ADAPTER)
    limit = _query_value("limit", limit, LIMIT_ADAPTER)
    offset = _query_value("offset", offset, OFFSET_ADAPTER)
    filters = restaurant_query.RestaurantFilters(
        search=(search or "").strip() or None,
        cuisines=split_csv(cuisines),
        types=split_csv(types),
        neighborhoods=split_csv(neighborhoods),
        tags=split_csv(tags),
        borough=boroughs,
        status=status,
        liked=liked,
        limit=settings.RESTAURANT_LIST_LIMIT if limit is None else limit,
        offset=offset or 0,
    )
    return await restaurant_query.list_restaurants(db, filters)


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
async def get_restaurant(
    restaurant_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a single restaurant with its cuisines, types, neighborhoods and tags"""
    try:
        return await restaurant_query.get_restaurant(db, restaurant_id)
    except RestaurantNotFoundError:
        raise HTTPException(status_code=404, detail="Restaurant not found")


@router.post("")
async def create_restaurant(
    data: RestaurantCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a restaurant together with its lookup links"""
    fields, associations = _split_payload(data.model_dump())
    try:
        restaurant_id = await association_writer.create_restaurant(db, fields, associations)
    except RestaurantValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"id": restaurant_id, "message": "Restaurant created successfully"}


@router.put("/{restaurant_id}")
async def update_restaurant(
    restaurant_id: int,
    data: RestaurantUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update only the supplied fields; each supplied list replaces that category's links"""
    fields, associations = _split_payload(data.model_dump(exclude_unset=True))
    try:
        await association_writer.update_restaurant(db, restaurant_id, fields, associations)
    except RestaurantValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RestaurantNotFoundError:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Restaurant updated successfully"}


@router.delete("/{restaurant_id}")
async def delete_restaurant(
    restaurant_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a restaurant and its links"""
    try:
        await association_writer.delete_restaurant(db, restaurant_id)
    except RestaurantNotFoundError:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Restaurant deleted successfully"}
