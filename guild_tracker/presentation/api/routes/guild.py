"""
Guild roster routes.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..dependencies import get_database, get_guild_service, require_api_key
from ....application.services import GuildService
from ....domain.roster.models import CombinedAnalysis, GuildAnalysis, RosterStatistics
from ....infrastructure.database import DatabaseConnection
from ....utils.datetime_utils import utc_now_iso

router = APIRouter(prefix="/api/guild", tags=["guild"])


@router.get("/data", response_model=GuildAnalysis)
async def get_guild_data(service: GuildService = Depends(get_guild_service)):
    """Full analysis of the live roster."""
    return await service.get_full_analysis()


@router.get("/force-refresh")
async def force_refresh(service: GuildService = Depends(get_guild_service)) -> Dict[str, Any]:
    """Flush every cache tier and return a freshly computed analysis."""
    result = await service.force_refresh()
    return {
        **result.model_dump(mode="json"),
        "cache": "refreshed",
        "timestamp": utc_now_iso(),
    }


@router.get("/health")
async def health(
    service: GuildService = Depends(get_guild_service),
    database: DatabaseConnection = Depends(get_database)
) -> Dict[str, Any]:
    return {
        "status": "OK",
        "database": await database.health_check(),
        "cache": service.cache_stats(),
    }


@router.get("/stats", response_model=RosterStatistics)
async def get_stats(service: GuildService = Depends(get_guild_service)):
    return await service.get_statistics()


@router.post("/mark-exited/{name}", dependencies=[Depends(require_api_key)])
async def mark_exited(name: str, service: GuildService = Depends(get_guild_service)):
    await service.mark_member_exited(name)
    return {"success": True, "message": f"Member {name} marked as exited"}


@router.post("/unmark-exited/{name}", dependencies=[Depends(require_api_key)])
async def unmark_exited(name: str, service: GuildService = Depends(get_guild_service)):
    await service.unmark_member_exited(name)
    return {"success": True, "message": f"Member {name} unmarked as exited"}


@router.get("/combined-data", response_model=CombinedAnalysis)
async def get_combined_data(service: GuildService = Depends(get_guild_service)):
    return await service.get_combined_analysis()
