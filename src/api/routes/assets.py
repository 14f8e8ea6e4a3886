"""Static text asset endpoints (phrase list and region list)."""

import asyncio

from fastapi import APIRouter

from src.core.config import get_settings
from src.core.models import TextListResponse
from src.services.dataset import load_lines

router = APIRouter(tags=["assets"])


async def _list_response(path: str) -> TextListResponse:
    items = await asyncio.to_thread(load_lines, path)
    return TextListResponse(items=items, count=len(items))


@router.get("/phrases", response_model=TextListResponse)
async def list_phrases():
    """Return the prompt phrases, one per non-blank line of the phrases file."""
    return await _list_response(get_settings().phrases_file)


@router.get("/regions", response_model=TextListResponse)
async def list_regions():
    """Return the selectable speaker regions."""
    return await _list_response(get_settings().regions_file)
