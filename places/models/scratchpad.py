"""
Scratchpad model - one free-text note for the whole app
"""
from sqlalchemy import Column, String, Text, DateTime
from datetime import datetime
from places.database import Base

SCRATCHPAD_ID = "main"


class Scratchpad(Base):
    __tablename__ = "scratchpad"

    id = Column(String, primary_key=True, default=SCRATCHPAD_ID)
    content = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
