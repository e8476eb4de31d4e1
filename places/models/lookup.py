"""
Lookup models - cuisines, types, neighborhoods and tags, each linked to
restaurants through a plain join table
"""
from sqlalchemy import Column, Integer, String, Table, ForeignKey
from places.config import get_settings
from places.database import Base

settings = get_settings()


class Cuisine(Base):
    __tablename__ = "cuisines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)


class RestaurantType(Base):
    """Kind of place: bar, cafe, bakery..."""
    __tablename__ = "types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)


class Neighborhood(Base):
    __tablename__ = "neighborhoods"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    color = Column(String, nullable=True, default=settings.DEFAULT_TAG_COLOR)


def _join_table(name: str, column: str, target: str) -> Table:
    # Composite primary key keeps (restaurant, lookup) links unique
    return Table(
        name,
        Base.metadata,
        Column("restaurant_id", Integer, ForeignKey("restaurants.id"), primary_key=True),
        Column(column, Integer, ForeignKey(f"{target}.id"), primary_key=True),
    )


restaurant_cuisines = _join_table("restaurant_cuisines", "cuisine_id", "cuisines")
restaurant_types = _join_table("restaurant_types", "type_id", "types")
restaurant_neighborhoods = _join_table("restaurant_neighborhoods", "neighborhood_id", "neighborhoods")
restaurant_tags = _join_table("restaurant_tags", "tag_id", "tags")
