"""
Type matchup analytics.

Everything in this module is a pure function of its inputs and the static
type chart: defense/attack buckets for a single creature, a short summary,
and an optional head-to-head breakdown against an opponent.
"""

from typing import List, Optional, Sequence

from utils.api_models import (
    AttackBuckets,
    BreakdownEntry,
    DefenseBuckets,
    MatchupReport,
    MatchupSummary,
    VersusReport,
)
from utils.constants import (
    BEST_COUNTERS_LIMIT,
    MULTIPLIER_PRECISION,
    RESIST_HIGHLIGHTS_LIMIT,
    VERDICT_BALANCED,
    VERDICT_CRITICAL,
    VERDICT_CRUSHING,
    VERDICT_DANGER,
    VERDICT_FAVORABLE,
)
from utils.type_chart import TYPE_CHART, TYPE_LIST


def format_multiplier(value: float) -> float:
    return round(value, MULTIPLIER_PRECISION)


def effectiveness(attacker: str, defenders: Sequence[str]) -> float:
    """
    Damage multiplier of an `attacker` type against a set of defending types.

    Multipliers compound across defenders, so two 0.5x resistances give
    0.25x. Pairs missing from the chart are neutral, and an empty defender
    set yields 1.

    Args:
        attacker: Attacking type name.
        defenders: Defending type names.

    Returns:
        Combined multiplier.
    """
    product = 1.0
    row = TYPE_CHART.get(attacker, {})
    for defender in defenders:
        product *= row.get(defender, 1)
    return product


def evaluate_defense_buckets(types: Sequence[str]) -> DefenseBuckets:
    defense: DefenseBuckets = {"resistantTo": [], "vulnerableTo": [], "immuneTo": []}

    for attacker in TYPE_LIST:
        multiplier = effectiveness(attacker, types)
        entry = {"type": attacker, "multiplier": format_multiplier(multiplier)}
        if multiplier == 0:
            defense["immuneTo"].append(entry)
        elif multiplier > 1:
            defense["vulnerableTo"].append(entry)
        elif multiplier < 1:
            defense["resistantTo"].append(entry)

    return defense


def evaluate_attack_buckets(types: Sequence[str]) -> AttackBuckets:
    attack: AttackBuckets = {"strongAgainst": [], "weakAgainst": [], "noEffect": []}

    for attack_type in types:
        for target in TYPE_LIST:
            multiplier = effectiveness(attack_type, [target])
            entry = {
                "type": attack_type,
                "target": target,
                "multiplier": format_multiplier(multiplier),
            }
            if multiplier == 0:
                attack["noEffect"].append(entry)
            elif multiplier > 1:
                attack["strongAgainst"].append(entry)
            elif multiplier < 1:
                attack["weakAgainst"].append(entry)

    return attack


def derive_verdict(offense: float, defense: float) -> str:
    """
    Label a head-to-head from the best offense and worst defense multipliers.

    Rules are checked in order and the first match wins.
    """
    if offense >= 4 and defense <= 1:
        return VERDICT_CRUSHING
    if offense >= 2 and defense <= 1:
        return VERDICT_FAVORABLE
    if defense >= 4 and offense <= 1:
        return VERDICT_CRITICAL
    if offense <= 0.5 and defense >= 2:
        return VERDICT_DANGER
    return VERDICT_BALANCED


def _breakdown(
    attackers: Sequence[str], defenders: Sequence[str]
) -> List[BreakdownEntry]:
    entries: List[BreakdownEntry] = [
        {
            "attackType": attacker,
            "multiplier": format_multiplier(effectiveness(attacker, defenders)),
        }
        for attacker in attackers
    ]
    # sorted() is stable, so ties keep the original type order
    return sorted(entries, key=lambda entry: entry["multiplier"], reverse=True)


def summarize_versus(
    types: Sequence[str], opponent_types: Sequence[str]
) -> Optional[VersusReport]:
    """
    Compare a subject's types against an opponent's types.

    Args:
        types: Subject's types.
        opponent_types: Opponent's types.

    Returns:
        VersusReport, or None when there are no opponent types.
    """
    if not opponent_types:
        return None

    offense_breakdown = _breakdown(types, opponent_types)
    defense_breakdown = _breakdown(opponent_types, types)

    best_offense = offense_breakdown[0] if offense_breakdown else None
    worst_defense = defense_breakdown[0] if defense_breakdown else None
    offense_multiplier = best_offense["multiplier"] if best_offense else 1
    defense_multiplier = worst_defense["multiplier"] if worst_defense else 1

    return {
        "opponentTypes": list(opponent_types),
        "offense": {
            "bestType": best_offense["attackType"] if best_offense else None,
            "multiplier": offense_multiplier,
            "breakdown": offense_breakdown,
        },
        "defense": {
            "riskiestType": worst_defense["attackType"] if worst_defense else None,
            "multiplier": defense_multiplier,
            "breakdown": defense_breakdown,
        },
        "verdict": derive_verdict(offense_multiplier, defense_multiplier),
    }


def summarize(defense: DefenseBuckets) -> MatchupSummary:
    """
    Pick suggested counters and resistance highlights.

    Counters are the strongest attacking types: highest multiplier first,
    ties broken alphabetically, so identical inputs give identical output.
    """
    ranked = sorted(
        defense["vulnerableTo"],
        key=lambda entry: (-entry["multiplier"], entry["type"]),
    )
    return {
        "bestCounters": [entry["type"] for entry in ranked[:BEST_COUNTERS_LIMIT]],
        "resistHighlights": defense["resistantTo"][:RESIST_HIGHLIGHTS_LIMIT],
    }


def build_matchup_report(
    types: Sequence[str], opponent_types: Sequence[str] = ()
) -> MatchupReport:
    """
    Build the full matchup report for a creature.

    Args:
        types: The subject's types (slot order).
        opponent_types: Optional opponent types for a head-to-head section.

    Returns:
        MatchupReport with defense, attack, summary and versus sections.
    """
    defense = evaluate_defense_buckets(types)
    return {
        "defense": defense,
        "attack": evaluate_attack_buckets(types),
        "summary": summarize(defense),
        "versus": summarize_versus(types, opponent_types),
    }
