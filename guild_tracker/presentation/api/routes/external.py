"""
External character routes.

Every route requires the API key.
"""

from typing import List

from fastapi import APIRouter, Depends

from ..dependencies import get_external_tracker, get_guild_service, require_api_key
from ..schemas import AddCharacterRequest
from ....application.services import ExternalCharacterTracker, GuildService
from ....domain.roster.models import CombinedAnalysis, ExternalCharacter

router = APIRouter(
    prefix="/api/guild/external",
    tags=["external"],
    dependencies=[Depends(require_api_key)],
)


@router.post("/add")
async def add_character(
    body: AddCharacterRequest,
    tracker: ExternalCharacterTracker = Depends(get_external_tracker)
):
    character = await tracker.add(body.name)
    return {"message": "Character added", "character": character}


@router.delete("/remove/{name}")
async def remove_character(
    name: str,
    tracker: ExternalCharacterTracker = Depends(get_external_tracker)
):
    await tracker.remove(name)
    return {"message": "Character removed"}


@router.get("/list", response_model=List[ExternalCharacter])
async def list_characters(tracker: ExternalCharacterTracker = Depends(get_external_tracker)):
    return await tracker.list()


@router.post("/mark-exited/{name}")
async def mark_exited(
    name: str,
    tracker: ExternalCharacterTracker = Depends(get_external_tracker)
):
    await tracker.mark_exited(name)
    return {"message": "Character marked as exited"}


@router.post("/unmark-exited/{name}")
async def unmark_exited(
    name: str,
    tracker: ExternalCharacterTracker = Depends(get_external_tracker)
):
    await tracker.unmark_exited(name)
    return {"message": "Character unmarked as exited"}


@router.post("/sync")
async def sync_characters(tracker: ExternalCharacterTracker = Depends(get_external_tracker)):
    report = await tracker.sync()
    return {
        "message": "Sync finished",
        "total": report.total,
        "updated": report.updated,
        "failed": report.failed,
    }


@router.get("/combined-data", response_model=CombinedAnalysis)
async def get_combined_data(service: GuildService = Depends(get_guild_service)):
    return await service.get_combined_analysis()
