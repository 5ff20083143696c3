"""
Roster Domain

Roster models, persisted entities and analysis functions.
"""

from .models import (
    ONLINE,
    OFFLINE,
    GuildMember,
    ExternalCharacter,
    Guild,
    LevelSplit,
    AnalysisBucket,
    GuildInfo,
    GuildAnalysis,
    ExternalSummary,
    CombinedAnalysis,
    RosterStatistics,
    MemberMessage,
)
from .entities import (
    GuildMemberRecord,
    MemberMessageRecord,
    ExternalCharacterRecord,
)
from . import analysis

__all__ = [
    "ONLINE",
    "OFFLINE",
    "GuildMember",
    "ExternalCharacter",
    "Guild",
    "LevelSplit",
    "AnalysisBucket",
    "GuildInfo",
    "GuildAnalysis",
    "ExternalSummary",
    "CombinedAnalysis",
    "RosterStatistics",
    "MemberMessage",
    "GuildMemberRecord",
    "MemberMessageRecord",
    "ExternalCharacterRecord",
    "analysis",
]
