"""
Roster Analysis

Pure functions deriving grouped and sorted views from a reconciled roster.
Nothing here performs I/O.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from .models import (
    OFFLINE,
    ONLINE,
    AnalysisBucket,
    CombinedAnalysis,
    ExternalCharacter,
    ExternalSummary,
    Guild,
    GuildAnalysis,
    GuildInfo,
    GuildMember,
    LevelSplit,
    RosterStatistics,
)
from ...utils.datetime_utils import utc_now

DEFAULT_LEVEL_THRESHOLD = 400

# Promoted vocations collapse into their base class
VOCATION_GROUPS: Dict[str, List[str]] = {
    "Druid": ["Druid", "Elder Druid"],
    "Knight": ["Knight", "Elite Knight"],
    "Sorcerer": ["Sorcerer", "Master Sorcerer"],
    "Paladin": ["Paladin", "Royal Paladin"],
    "Monk": ["Monk", "Exalted Monk"],
}

_CANONICAL_VOCATION = {
    vocation: group
    for group, vocations in VOCATION_GROUPS.items()
    for vocation in vocations
}

M = TypeVar("M", bound=GuildMember)


def canonical_vocation(vocation: str) -> str:
    """Base class for a vocation, or the vocation itself when unknown."""
    return _CANONICAL_VOCATION.get(vocation, vocation)


def filter_online(members: Iterable[M]) -> List[M]:
    """Members that are online and not marked exited."""
    return [m for m in members if m.status != OFFLINE and not m.is_exited]


def filter_exited_online(members: Iterable[M]) -> List[M]:
    """Members marked exited that are still online."""
    return [m for m in members if m.status != OFFLINE and m.is_exited]


def group_by_vocation(
    members: Iterable[M],
    collapse_tiers: bool = False
) -> Dict[str, List[M]]:
    """
    Group members by vocation.

    Groups keep the order in which their first member was seen.

    Args:
        members: Members to group
        collapse_tiers: Map promoted vocations onto their base class

    Returns:
        Vocation name to members
    """
    groups: Dict[str, List[M]] = {}
    for member in members:
        key = canonical_vocation(member.vocation) if collapse_tiers else member.vocation
        groups.setdefault(key, []).append(member)
    return groups


def split_by_level(
    members: Iterable[GuildMember],
    threshold: int = DEFAULT_LEVEL_THRESHOLD
) -> LevelSplit:
    """Partition members into level >= threshold and the rest."""
    above: List[GuildMember] = []
    below: List[GuildMember] = []
    for member in members:
        (above if member.level >= threshold else below).append(member)
    return LevelSplit(threshold=threshold, above=above, below=below)


def sort_by_level_desc(members: Sequence[M]) -> List[M]:
    """Highest level first; ties keep their original order."""
    return sorted(members, key=lambda m: m.level, reverse=True)


def build_bucket(
    members: Sequence[GuildMember],
    threshold: int = DEFAULT_LEVEL_THRESHOLD
) -> AnalysisBucket:
    """Collapsed vocation groups, level split and sorted list for one partition."""
    return AnalysisBucket(
        count=len(members),
        vocations=group_by_vocation(members, collapse_tiers=True),
        by_level=split_by_level(members, threshold),
        sorted=sort_by_level_desc(members),
    )


def full_analysis(
    guild: Guild,
    threshold: int = DEFAULT_LEVEL_THRESHOLD,
    generated_at: Optional[datetime] = None
) -> GuildAnalysis:
    """
    Compose the full guild analysis.

    Counts come from the remote aggregate fields, not from the member
    list, so they still include members marked exited.

    Args:
        guild: Reconciled guild snapshot
        threshold: Level threshold for the above/below split
        generated_at: Timestamp to report, defaults to now

    Returns:
        Analysis payload
    """
    active = build_bucket(filter_online(guild.members), threshold)
    exited = build_bucket(filter_exited_online(guild.members), threshold)

    return GuildAnalysis(
        info=GuildInfo(
            name=guild.name,
            online=guild.players_online,
            offline=guild.players_offline,
            total=guild.members_total,
        ),
        vocations=active.vocations,
        by_level=active.by_level,
        sorted=active.sorted,
        exited=exited,
        generated_at=generated_at or utc_now(),
    )


def summarize_external(characters: Sequence[ExternalCharacter]) -> ExternalSummary:
    """Counts for the external roster."""
    online = sum(1 for c in characters if c.status == ONLINE)
    return ExternalSummary(
        characters=list(characters),
        online=online,
        offline=len(characters) - online,
        exited=sum(1 for c in characters if c.is_exited),
        total=len(characters),
    )


def combined_analysis(
    guild: Guild,
    externals: Sequence[ExternalCharacter],
    threshold: int = DEFAULT_LEVEL_THRESHOLD,
    generated_at: Optional[datetime] = None
) -> CombinedAnalysis:
    """
    Merge the guild roster with the external roster.

    External characters join the member pool after the guild members and
    their counts are added to the remote aggregate.
    """
    pool: List[GuildMember] = [*guild.members, *externals]
    active = build_bucket(filter_online(pool), threshold)
    exited = build_bucket(filter_exited_online(pool), threshold)
    external = summarize_external(externals)

    return CombinedAnalysis(
        info=GuildInfo(
            name=guild.name,
            online=guild.players_online + external.online,
            offline=guild.players_offline + external.offline,
            total=guild.members_total + external.total,
        ),
        vocations=active.vocations,
        by_level=active.by_level,
        sorted=active.sorted,
        exited=exited,
        external=external,
        generated_at=generated_at or utc_now(),
    )


def roster_statistics(members: Sequence[GuildMember]) -> RosterStatistics:
    """Totals, level figures and collapsed vocation distribution."""
    if not members:
        return RosterStatistics()

    levels = [m.level for m in members]
    vocations = {
        vocation: len(group)
        for vocation, group in group_by_vocation(members, collapse_tiers=True).items()
    }

    return RosterStatistics(
        total_members=len(members),
        online=sum(1 for m in members if m.status == ONLINE),
        exited=sum(1 for m in members if m.is_exited),
        average_level=round(sum(levels) / len(levels), 2),
        highest_level=max(levels),
        vocations=vocations,
    )
