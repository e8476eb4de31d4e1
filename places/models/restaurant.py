"""
Restaurant model - the tracked place itself
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, Float, DateTime, JSON
from datetime import datetime
from places.database import Base


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)

    # Location
    neighborhood = Column(String, nullable=True)  # legacy free text, see restaurant_neighborhoods
    borough = Column(String, nullable=True, index=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Visit tracking
    status = Column(String, nullable=True, default="Unvisited")
    liked = Column(Boolean, nullable=False, default=False)

    # Happy hour
    happy_hour = Column(Text, nullable=True)
    happy_hour_start_time = Column(String, nullable=True)  # legacy
    happy_hour_end_time = Column(String, nullable=True)  # legacy
    happy_hour_data = Column(JSON(none_as_null=True), nullable=True)  # [{"days": [...], "start_time", "end_time", "offer"}]
    has_happy_hour = Column(Boolean, nullable=False, default=False)

    notes = Column(Text, nullable=True)
    what_to_order = Column(Text, nullable=True)
    website_link = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Restaurant id={self.id} name={self.name!r}>"
