"""
Type definitions for gateway payloads to ensure strict typing and reduce runtime errors.

Keys mirror the JSON wire shape handed to front ends, so they use camelCase.
"""

from typing import List, Optional, TypedDict, Union


class Ability(TypedDict):
    name: str
    hidden: bool


class StatEntry(TypedDict):
    label: str
    base: int
    effort: int


class NormalizedCreature(TypedDict):
    """
    Merged record built from the /pokemon and /pokemon-species resources.

    Upstream does not guarantee every descriptive field, so the Optional
    fields are None when the species payload omits them. `habitat`, `color`
    and `shape` fall back to "unknown" instead.

    Attributes:
        height: Meters (upstream reports decimetres).
        weight: Kilograms (upstream reports hectograms).
        types: One or two type names in slot order.
        abilities: Non-hidden abilities first.
        sprites: Deduplicated image URLs in preference order.
        eggGroups: Egg group names in fetch order.
    """

    id: int
    name: str
    order: int
    height: float
    weight: float
    baseExperience: Optional[int]
    types: List[str]
    abilities: List[Ability]
    stats: List[StatEntry]
    sprites: List[str]
    movesSample: List[str]
    habitat: str
    color: str
    shape: str
    genus: Optional[str]
    flavorText: Optional[str]
    growthRate: Optional[str]
    captureRate: Optional[int]
    eggGroups: List[str]
    legendary: bool
    mythical: bool


class DefenseEntry(TypedDict):
    type: str
    multiplier: float


class AttackEntry(TypedDict):
    type: str
    target: str
    multiplier: float


class DefenseBuckets(TypedDict):
    resistantTo: List[DefenseEntry]
    vulnerableTo: List[DefenseEntry]
    immuneTo: List[DefenseEntry]


class AttackBuckets(TypedDict):
    strongAgainst: List[AttackEntry]
    weakAgainst: List[AttackEntry]
    noEffect: List[AttackEntry]


class MatchupSummary(TypedDict):
    bestCounters: List[str]
    resistHighlights: List[DefenseEntry]


class BreakdownEntry(TypedDict):
    attackType: str
    multiplier: float


class OffenseSummary(TypedDict):
    bestType: Optional[str]
    multiplier: float
    breakdown: List[BreakdownEntry]


class DefenseSummary(TypedDict):
    riskiestType: Optional[str]
    multiplier: float
    breakdown: List[BreakdownEntry]


class VersusReport(TypedDict):
    """
    Head-to-head comparison, present only when an opponent is supplied.

    Attributes:
        offense: Subject's types attacking the opponent, strongest first.
        defense: Opponent's types attacking the subject, most dangerous first.
        verdict: Short label summarizing the matchup.
    """

    opponentTypes: List[str]
    offense: OffenseSummary
    defense: DefenseSummary
    verdict: str


class MatchupReport(TypedDict):
    defense: DefenseBuckets
    attack: AttackBuckets
    summary: MatchupSummary
    versus: Optional[VersusReport]


class OpponentMeta(TypedDict):
    name: str
    source: str


class MatchupMeta(TypedDict):
    subject: str
    opponent: Optional[OpponentMeta]


class LookupResponse(TypedDict):
    source: str
    data: NormalizedCreature


class MatchupResponse(TypedDict):
    data: MatchupReport
    meta: MatchupMeta


class CatalogResponse(TypedDict):
    data: List[str]


class CacheStats(TypedDict):
    """
    Represents cache store statistics.

    Attributes:
        size: Current number of live entries in the cache.
        capacity: Maximum allowed entries before eviction triggers.
        ttl: Sliding expiration in seconds.
    """

    size: int
    capacity: int
    ttl: Union[int, float]


class ServiceCacheStats(CacheStats):
    """
    Cache statistics enriched with the service's hit/miss counters.

    Attributes:
        hits: Number of successful cache lookups.
        misses: Number of failed lookups that resulted in upstream calls.
        hit_rate: Percentage string (e.g., '85.5%').
    """

    hits: int
    misses: int
    hit_rate: str
