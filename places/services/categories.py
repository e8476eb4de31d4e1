"""
Lookup categories - every relation a restaurant is tagged through
"""
from dataclasses import dataclass

from sqlalchemy import Column, Table

from places.database import Base
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


@dataclass(frozen=True)
class Category:
    key: str
    model: type[Base]
    link_table: Table
    link_column: str

    @property
    def restaurant_fk(self) -> Column:
        return self.link_table.c.restaurant_id

    @property
    def lookup_fk(self) -> Column:
        return self.link_table.c[self.link_column]


CUISINES = Category("cuisines", Cuisine, restaurant_cuisines, "cuisine_id")
TYPES = Category("types", RestaurantType, restaurant_types, "type_id")
NEIGHBORHOODS = Category("neighborhoods", Neighborhood, restaurant_neighborhoods, "neighborhood_id")
TAGS = Category("tags", Tag, restaurant_tags, "tag_id")

# Order matters: filters and rewrites run in this sequence
CATEGORIES = (CUISINES, TYPES, NEIGHBORHOODS, TAGS)
CATEGORY_BY_KEY = {c.key: c for c in CATEGORIES}
