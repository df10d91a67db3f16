"""
Position normalization and lineup slot eligibility.

Raw position labels from league data come in many spellings (DE, EDGE, OLB,
FS, ...). Everything downstream works on the eight canonical positions
QB, RB, WR, TE, K, DL, LB and DB.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional

from ..data.models import ALL_STAT_POSITIONS


_SYNONYMS: Dict[str, str] = {}
for _canonical, _labels in (
    ("DL", ("DL", "DE", "DT", "NT", "EDGE", "LE", "RE")),
    ("LB", ("LB", "OLB", "MLB", "ILB", "SLB", "WLB")),
    ("DB", ("DB", "CB", "S", "FS", "SS", "NB", "DBS")),
):
    for _label in _labels:
        _SYNONYMS[_label] = _canonical

FLEX_SLOTS = frozenset({
    "FLEX", "WRRB", "WRRBTE", "WRRB_TE", "WRRB_FLEX", "REC_FLEX", "RBWR", "RBWRTE",
    "W/R/T", "W/R", "W/T", "R/T",
})
SUPER_FLEX_SLOTS = frozenset({
    "SUPER_FLEX", "QBRBWRTE", "QBRBWR", "QBSF", "SFLX", "Q/W/R/T", "OP",
})
NON_STARTING_SLOTS = frozenset({
    "BN", "BENCH", "TAXI", "IR", "RESERVE", "RESERVED", "PUP", "OUT",
})

_FLEX_ALLOWED = frozenset({"RB", "WR", "TE"})
_SUPER_FLEX_ALLOWED = frozenset({"QB", "RB", "WR", "TE"})
_IDP_ALLOWED = frozenset({"DL", "LB", "DB"})
_EXACT_SLOTS = frozenset(ALL_STAT_POSITIONS)


def normalize_position(raw: Optional[str]) -> str:
    """Map a raw position label to its canonical position.

    Unknown labels come back uppercased and otherwise unchanged; an empty
    or missing label yields "".
    """
    if not raw:
        return ""
    label = raw.strip().upper()
    return _SYNONYMS.get(label, label)


def normalize_positions(raw_labels: Iterable[Optional[str]]) -> List[str]:
    """Normalize a list of labels, dropping empties and duplicates in order."""
    seen = []
    for raw in raw_labels:
        pos = normalize_position(raw)
        if pos and pos not in seen:
            seen.append(pos)
    return seen


def allowed_positions(slot: str) -> FrozenSet[str]:
    """Canonical positions that may fill a lineup slot."""
    name = (slot or "").strip().upper()
    if name in _EXACT_SLOTS:
        return frozenset({name})
    if name in FLEX_SLOTS:
        return _FLEX_ALLOWED
    if name in SUPER_FLEX_SLOTS:
        return _SUPER_FLEX_ALLOWED
    if "IDP" in name:
        return _IDP_ALLOWED
    return frozenset({name})


def is_eligible(base_position: str, fantasy_positions: Iterable[str],
                allowed: FrozenSet[str]) -> bool:
    """Check a candidate against a slot's allowed set.

    Multi-position players qualify through any of their fantasy positions.
    """
    if base_position in allowed:
        return True
    return not allowed.isdisjoint(fantasy_positions)


def is_starting_slot(slot: str) -> bool:
    """False for bench, taxi and reserve slots."""
    return (slot or "").strip().upper() not in NON_STARTING_SLOTS


def is_flexible_slot(slot: str) -> bool:
    """True for flex, superflex and IDP slots."""
    name = (slot or "").strip().upper()
    return name in FLEX_SLOTS or name in SUPER_FLEX_SLOTS or "IDP" in name


def expand_slots(lineup_config: Dict[str, int]) -> List[str]:
    """Flatten {slot: count} into individual slot instances, starting slots only."""
    slots = []
    for slot, count in lineup_config.items():
        if not is_starting_slot(slot) or not count or count < 0:
            continue
        slots.extend([slot] * int(count))
    return slots


def ordered_slots(lineup_config: Dict[str, int]) -> List[str]:
    """Expanded slot instances in fill order.

    Fixed single-position slots come first, then flex and IDP slots, then
    superflex. Order within a tier follows the config.
    """
    def tier(slot: str) -> int:
        if not is_flexible_slot(slot):
            return 0
        return len(allowed_positions(slot))

    # sorted() is stable, so config order survives within a tier
    return sorted(expand_slots(lineup_config), key=tier)


def credited_position(slot: str, candidate_positions: Iterable[str], base: str) -> str:
    """Position a started player is credited with for a given slot."""
    name = (slot or "").strip().upper()
    if name in _EXACT_SLOTS:
        return name
    allowed = allowed_positions(name)
    for pos in candidate_positions:
        if pos in allowed:
            return pos
    return base


def lineup_config_from_slots(roster_positions: Iterable[str]) -> Dict[str, int]:
    """Count starting slots from a flat roster-positions list (e.g. ["QB", "RB", "RB", "BN"])."""
    config: Dict[str, int] = {}
    for slot in roster_positions:
        if not slot or not is_starting_slot(slot):
            continue
        config[slot] = config.get(slot, 0) + 1
    return config
