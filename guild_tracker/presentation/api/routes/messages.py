"""
Member message routes.
"""

from typing import List

from fastapi import APIRouter, Depends

from ..dependencies import get_guild_service, require_api_key
from ..schemas import MessageRequest
from ....application.services import GuildService
from ....domain.roster.models import MemberMessage

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("/", response_model=List[MemberMessage])
async def list_messages(service: GuildService = Depends(get_guild_service)):
    return await service.get_messages()


@router.post("/", response_model=MemberMessage, dependencies=[Depends(require_api_key)])
async def set_message(body: MessageRequest, service: GuildService = Depends(get_guild_service)):
    return await service.set_message(body.name, body.message)


@router.post("/cleanup", dependencies=[Depends(require_api_key)])
async def cleanup_messages(service: GuildService = Depends(get_guild_service)):
    removed = await service.cleanup_offline_messages()
    return {"removed": removed}
