"""
Scratchpad API - a single shared free-text note
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import datetime
from pydantic import BaseModel

from places.database import get_db
from places.models.scratchpad import Scratchpad, SCRATCHPAD_ID
from places.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


class ScratchpadResponse(BaseModel):
    content: str
    updated_at: Optional[datetime] = None


class ScratchpadUpdate(BaseModel):
    content: str = ""


@router.get("", response_model=ScratchpadResponse)
async def get_scratchpad(db: AsyncSession = Depends(get_db)):
    note = await db.get(Scratchpad, SCRATCHPAD_ID)
    if note is None:
        return ScratchpadResponse(content="")
    return ScratchpadResponse(content=note.content or "", updated_at=note.updated_at)


@router.post("")
async def save_scratchpad(
    data: ScratchpadUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Replace the note wholesale"""
    note = await db.get(Scratchpad, SCRATCHPAD_ID)
    if note is None:
        note = Scratchpad(id=SCRATCHPAD_ID)
        db.add(note)
    note.content = data.content
    note.updated_at = datetime.utcnow()
    await db.commit()
    logger.info(f"Scratchpad saved ({len(data.content)} chars)")
    return {
        "message": "Scratchpad saved",
        "content": note.content,
        "updated_at": note.updated_at,
    }
