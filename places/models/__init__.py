from places.models.restaurant import Restaurant
from places.models.lookup import (
    Cuisine,
    RestaurantType,
    Neighborhood,
    Tag,
    restaurant_cuisines,
    restaurant_types,
    restaurant_neighborhoods,
    restaurant_tags,
)
from places.models.scratchpad import Scratchpad, SCRATCHPAD_ID

__all__ = [
    "Restaurant",
    "Cuisine",
    "RestaurantType",
    "Neighborhood",
    "Tag",
    "restaurant_cuisines",
    "restaurant_types",
    "restaurant_neighborhoods",
    "restaurant_tags",
    "Scratchpad",
    "SCRATCHPAD_ID",
]
