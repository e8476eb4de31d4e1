"""
Restaurant listing query.

Every restaurant is LEFT JOINed to all four lookup relations and grouped per
restaurant, with the lookup names folded into comma-separated aggregates.
Filters are typed clause objects: equality clauses restrict base rows (WHERE),
membership and text-search clauses test the aggregates (HAVING).
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from sqlalchemy import Select, String, and_, distinct, func, literal, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from places.config import get_settings
from places.models.restaurant import Restaurant
from places.models.lookup import Tag
from places.services.categories import CATEGORIES, CUISINES, TYPES, NEIGHBORHOODS
from places.services.errors import RestaurantNotFoundError
from places.utils.helpers import split_csv

settings = get_settings()


# --- Clauses ---

class Clause:
    def compile(self) -> ColumnElement[bool]:
        raise NotImplementedError


@dataclass(frozen=True)
class Equals(Clause):
    column: Any
    value: Any

    def compile(self) -> ColumnElement[bool]:
        return self.column == self.value


@dataclass(frozen=True)
class MemberOf(Clause):
    """
    Comma-separated aggregate holds at least one of ``values`` as a whole
    element, ignoring case
    """
    aggregate: Any
    values: Sequence[str]

    def compile(self) -> ColumnElement[bool]:
        padded = func.lower(literal(",").concat(func.coalesce(self.aggregate, "")).concat(","))
        return or_(*(func.instr(padded, f",{value.lower()},") > 0 for value in self.values))


@dataclass(frozen=True)
class TextSearch(Clause):
    """Case-insensitive substring match against any of ``columns``"""
    term: str
    columns: Sequence[Any]

    def compile(self) -> ColumnElement[bool]:
        return or_(*(column.icontains(self.term, autoescape=True) for column in self.columns))


@dataclass(frozen=True)
class AllOf(Clause):
    clauses: Sequence[Clause]

    def compile(self) -> ColumnElement[bool]:
        compiled = [c.compile() for c in self.clauses]
        return compiled[0] if len(compiled) == 1 else and_(*compiled)


@dataclass(frozen=True)
class AnyOf(Clause):
    clauses: Sequence[Clause]

    def compile(self) -> ColumnElement[bool]:
        compiled = [c.compile() for c in self.clauses]
        return compiled[0] if len(compiled) == 1 else or_(*compiled)


# --- Aggregates ---

def _group_names(column) -> ColumnElement[str]:
    return func.group_concat(distinct(column), type_=String)


NAME_AGGREGATES = {category.key: _group_names(category.model.name) for category in CATEGORIES}
# "name:color" pairs; color may be empty, resolved when shaping
TAG_PAIRS = _group_names(Tag.name + ":" + func.coalesce(Tag.color, ""))

SEARCH_COLUMNS = (
    Restaurant.name,
    Restaurant.notes,
    Restaurant.what_to_order,
    Restaurant.borough,
    *NAME_AGGREGATES.values(),
)


# --- Filters ---

@dataclass
class RestaurantFilters:
    search: Optional[str] = None
    cuisines: List[str] = field(default_factory=list)
    types: List[str] = field(default_factory=list)
    neighborhoods: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    borough: Optional[str] = None
    status: Optional[str] = None
    liked: Optional[bool] = None
    limit: int = settings.RESTAURANT_LIST_LIMIT
    offset: int = 0

    def where_clauses(self) -> List[Clause]:
        clauses: List[Clause] = []
        if self.borough:
            clauses.append(Equals(Restaurant.borough, self.borough))
        if self.status:
            clauses.append(Equals(Restaurant.status, self.status))
        if self.liked is not None:
            clauses.append(Equals(Restaurant.liked, self.liked))
        return clauses

    def having_clause(self) -> Optional[Clause]:
        """
        Category filters intersect (one MemberOf per category, in CATEGORIES
        order), values within a category union. A search term is OR'ed with
        the whole category block: a text match is kept even when it fails the
        category filters.
        """
        membership = [
            MemberOf(NAME_AGGREGATES[category.key], tuple(values))
            for category in CATEGORIES
            if (values := getattr(self, category.key))
        ]
        branches: List[Clause] = []
        if membership:
            branches.append(AllOf(tuple(membership)))
        if self.search:
            branches.append(TextSearch(self.search, SEARCH_COLUMNS))
        if not branches:
            return None
        return AnyOf(tuple(branches))


def base_query() -> Select:
    """Restaurants with their aggregated lookup names, one row per restaurant."""
    query = select(
        Restaurant,
        NAME_AGGREGATES[CUISINES.key].label("cuisines"),
        NAME_AGGREGATES[TYPES.key].label("types"),
        NAME_AGGREGATES[NEIGHBORHOODS.key].label("neighborhoods"),
        TAG_PAIRS.label("tags"),
    ).select_from(Restaurant)

    for category in CATEGORIES:
        query = query.outerjoin(
            category.link_table, category.restaurant_fk == Restaurant.id
        ).outerjoin(
            category.model, category.model.id == category.lookup_fk
        )

    return query.group_by(Restaurant.id)


def build_list_query(filters: RestaurantFilters) -> Select:
    query = base_query()
    for clause in filters.where_clauses():
        query = query.where(clause.compile())
    having = filters.having_clause()
    if having is not None:
        query = query.having(having.compile())
    return query.order_by(Restaurant.name).limit(filters.limit).offset(filters.offset)


# --- Shaping ---

def split_tags(value: Optional[str]) -> List[dict]:
    tags = []
    for entry in split_csv(value):
        name, sep, color = entry.rpartition(":")
        if not sep:
            name, color = entry, ""
        tags.append({"name": name, "color": color or settings.DEFAULT_TAG_COLOR})
    return tags


def shape_restaurant(row) -> dict:
    restaurant = row[0]
    data = {column.key: getattr(restaurant, column.key) for column in Restaurant.__table__.columns}
    data["liked"] = bool(restaurant.liked)
    data["has_happy_hour"] = bool(restaurant.has_happy_hour)
    data["happy_hour_data"] = restaurant.happy_hour_data or []
    data["cuisines"] = split_csv(row.cuisines)
    data["types"] = split_csv(row.types)
    data["neighborhoods"] = split_csv(row.neighborhoods)
    data["tags"] = split_tags(row.tags)
    return data


# --- Queries ---

async def list_restaurants(db: AsyncSession, filters: RestaurantFilters) -> List[dict]:
    result = await db.execute(
        build_list_query(filters).execution_options(populate_existing=True)
    )
    return [shape_restaurant(row) for row in result.all()]


async def get_restaurant(db: AsyncSession, restaurant_id: int) -> dict:
    result = await db.execute(
        base_query()
        .where(Restaurant.id == restaurant_id)
        .execution_options(populate_existing=True)
    )
    row = result.first()
    if row is None:
        raise RestaurantNotFoundError(restaurant_id)
    return shape_restaurant(row)
