"""
Roster Domain Models

Pydantic models for the guild roster and the views derived from it.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

ONLINE = "online"
OFFLINE = "offline"


class GuildMember(BaseModel):
    """One roster entry, enriched with locally owned state."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    level: int = Field(..., ge=1)
    vocation: str
    status: str
    last_seen: Optional[datetime] = None
    is_exited: bool = False
    is_external: bool = False


class ExternalCharacter(GuildMember):
    """Character tracked manually from outside the guild."""

    is_external: bool = True


class Guild(BaseModel):
    """Guild snapshot as of one fetch."""

    name: str
    players_online: int = 0
    players_offline: int = 0
    members_total: int = 0
    members: List[GuildMember] = Field(default_factory=list)


class LevelSplit(BaseModel):
    """Members partitioned by a level threshold."""

    threshold: int
    above: List[GuildMember] = Field(default_factory=list)
    below: List[GuildMember] = Field(default_factory=list)


class AnalysisBucket(BaseModel):
    """Grouped, split and sorted views over one member partition."""

    count: int = 0
    vocations: Dict[str, List[GuildMember]] = Field(default_factory=dict)
    by_level: LevelSplit
    sorted: List[GuildMember] = Field(default_factory=list)


class GuildInfo(BaseModel):
    """Aggregate counts."""

    name: str
    online: int = 0
    offline: int = 0
    total: int = 0


class GuildAnalysis(BaseModel):
    """Full analysis payload served by /data."""

    info: GuildInfo
    vocations: Dict[str, List[GuildMember]] = Field(default_factory=dict)
    by_level: LevelSplit
    sorted: List[GuildMember] = Field(default_factory=list)
    exited: AnalysisBucket
    generated_at: datetime


class ExternalSummary(BaseModel):
    """External roster counts for the combined view."""

    characters: List[ExternalCharacter] = Field(default_factory=list)
    online: int = 0
    offline: int = 0
    exited: int = 0
    total: int = 0


class CombinedAnalysis(GuildAnalysis):
    """Guild analysis merged with the external roster."""

    external: ExternalSummary


class RosterStatistics(BaseModel):
    """Roster-wide statistics from persisted members."""

    total_members: int = 0
    online: int = 0
    exited: int = 0
    average_level: float = 0.0
    highest_level: int = 0
    vocations: Dict[str, int] = Field(default_factory=dict)


class MemberMessage(BaseModel):
    """Free-text annotation attached to a member."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    message: str = Field(..., max_length=50)
    updated_at: Optional[datetime] = None
