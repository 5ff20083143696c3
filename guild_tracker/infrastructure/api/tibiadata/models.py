"""
TibiaData API Models

Strict Pydantic models for TibiaData v4 responses. Unknown keys are
ignored; missing keys or wrong types reject the whole payload.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class StrictModel(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")


class RemoteGuildMember(StrictModel):
    """Guild roster entry."""
    name: str = Field(..., min_length=1)
    level: int = Field(..., ge=1)
    vocation: str
    status: Literal["online", "offline"]


class RemoteGuild(StrictModel):
    """Guild payload."""
    name: str
    players_online: int = Field(..., ge=0)
    players_offline: int = Field(..., ge=0)
    members_total: int = Field(..., ge=0)
    members: List[RemoteGuildMember]


class GuildResponse(StrictModel):
    """Response of /guild/{name}."""
    guild: RemoteGuild


class RemoteCharacter(StrictModel):
    """Character details."""
    name: str
    level: int = Field(..., ge=1)
    vocation: str
    last_login: Optional[str] = None


class RemoteOtherCharacter(StrictModel):
    """Entry of the account's character list."""
    name: str
    world: str
    status: str


class CharacterEnvelope(StrictModel):
    character: RemoteCharacter
    other_characters: Optional[List[RemoteOtherCharacter]] = None


class ResponseStatus(StrictModel):
    http_code: int


class ResponseInformation(StrictModel):
    status: ResponseStatus


class CharacterResponse(StrictModel):
    """Response of /character/{name}."""
    character: CharacterEnvelope
    information: ResponseInformation
