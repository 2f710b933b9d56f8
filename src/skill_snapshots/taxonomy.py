from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence


# ---------------------------------------------------------------------------
# Canonical activity types (single source of truth)
#
# Every skill/boss/activity line in a snapshot is keyed by one of these
# labels. Each label belongs to exactly ONE kind.
# ---------------------------------------------------------------------------

UNKNOWN = "UNKNOWN"
OVERALL = "OVERALL"

KIND_SKILL = "skill"
KIND_BOSS = "boss"
KIND_ACTIVITY = "activity"

KIND_ORDER: List[str] = [KIND_SKILL, KIND_ACTIVITY, KIND_BOSS]

SKILL_ACTIVITY_TYPES: Sequence[str] = (
    OVERALL,
    "ATTACK",
    "DEFENCE",
    "STRENGTH",
    "HITPOINTS",
    "RANGED",
    "PRAYER",
    "MAGIC",
    "COOKING",
    "WOODCUTTING",
    "FLETCHING",
    "FISHING",
    "FIREMAKING",
    "CRAFTING",
    "SMITHING",
    "MINING",
    "HERBLORE",
    "AGILITY",
    "THIEVING",
    "SLAYER",
    "FARMING",
    "RUNECRAFT",
    "HUNTER",
    "CONSTRUCTION",
)

ACTIVITY_ACTIVITY_TYPES: Sequence[str] = (
    "LEAGUE_POINTS",
    "DEADMAN_POINTS",
    "BOUNTY_HUNTER__HUNTER",
    "BOUNTY_HUNTER__ROGUE",
    "BOUNTY_HUNTER_LEGACY__HUNTER",
    "BOUNTY_HUNTER_LEGACY__ROGUE",
    "CLUE_SCROLLS_ALL",
    "CLUE_SCROLLS_BEGINNER",
    "CLUE_SCROLLS_EASY",
    "CLUE_SCROLLS_MEDIUM",
    "CLUE_SCROLLS_HARD",
    "CLUE_SCROLLS_ELITE",
    "CLUE_SCROLLS_MASTER",
    "LMS__RANK",
    "PVP_ARENA__RANK",
    "SOUL_WARS_ZEAL",
    "RIFTS_CLOSED",
    "COLOSSEUM_GLORY",
    "COLLECTIONS_LOGGED",
)

BOSS_ACTIVITY_TYPES: Sequence[str] = (
    "ABYSSAL_SIRE",
    "ALCHEMICAL_HYDRA",
    "AMOXLIATL",
    "ARAXXOR",
    "ARTIO",
    "BARROWS_CHESTS",
    "BRYOPHYTA",
    "CALLISTO",
    "CALVARION",
    "CERBERUS",
    "CHAMBERS_OF_XERIC",
    "CHAMBERS_OF_XERIC_CHALLENGE_MODE",
    "CHAOS_ELEMENTAL",
    "CHAOS_FANATIC",
    "COMMANDER_ZILYANA",
    "CORPOREAL_BEAST",
    "CRAZY_ARCHAEOLOGIST",
    "DAGANNOTH_PRIME",
    "DAGANNOTH_REX",
    "DAGANNOTH_SUPREME",
    "DERANGED_ARCHAEOLOGIST",
    "DUKE_SUCELLUS",
    "GENERAL_GRAARDOR",
    "GIANT_MOLE",
    "GROTESQUE_GUARDIANS",
    "HESPORI",
    "KALPHITE_QUEEN",
    "KING_BLACK_DRAGON",
    "KRAKEN",
    "KREEARRA",
    "KRIL_TSUTSAROTH",
    "LUNAR_CHESTS",
    "MIMIC",
    "NEX",
    "NIGHTMARE",
    "PHOSANIS_NIGHTMARE",
    "OBOR",
    "PHANTOM_MUSPAH",
    "SARACHNIS",
    "SCORPIA",
    "SCURRIUS",
    "SKOTIZO",
    "SOL_HEREDIT",
    "SPINDEL",
    "TEMPOROSS",
    "THE_GAUNTLET",
    "THE_CORRUPTED_GAUNTLET",
    "THE_HUEYCOATL",
    "THE_LEVIATHAN",
    "THE_ROYAL_TITANS",
    "THE_WHISPERER",
    "THEATRE_OF_BLOOD",
    "THEATRE_OF_BLOOD_HARD_MODE",
    "THERMONUCLEAR_SMOKE_DEVIL",
    "TOMBS_OF_AMASCUT",
    "TOMBS_OF_AMASCUT_EXPERT_MODE",
    "TZKALZUK",
    "TZTOKJAD",
    "VARDORVIS",
    "VENENATIS",
    "VETION",
    "VORKATH",
    "WINTERTODT",
    "YAMA",
    "ZALCANO",
    "ZULRAH",
)

_TYPES_BY_KIND: Mapping[str, Sequence[str]] = {
    KIND_SKILL: SKILL_ACTIVITY_TYPES,
    KIND_ACTIVITY: ACTIVITY_ACTIVITY_TYPES,
    KIND_BOSS: BOSS_ACTIVITY_TYPES,
}


def _build_kind_map() -> Dict[str, str]:
    out: Dict[str, str] = {}
    for kind in KIND_ORDER:
        for label in _TYPES_BY_KIND[kind]:
            out.setdefault(label, kind)
    return out


# label -> kind (first kind wins on overlap; validate_mappings reports it)
ACTIVITY_TO_KIND: Mapping[str, str] = _build_kind_map()


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def all_activity_types(*, kind: Optional[str] = None) -> List[str]:
    """Labels in deterministic order; all kinds when ``kind`` is None."""
    if kind is None:
        return [label for k in KIND_ORDER for label in _TYPES_BY_KIND[k]]
    if kind not in _TYPES_BY_KIND:
        raise ValueError(f"Unknown activity kind '{kind}'")
    return list(_TYPES_BY_KIND[kind])


def activity_type_from_value(value: object) -> str:
    """Normalize a stored label; anything unrecognized becomes UNKNOWN."""
    if isinstance(value, str):
        label = value.strip()
        if label in ACTIVITY_TO_KIND:
            return label
    return UNKNOWN


def get_kind(activity_type: str) -> Optional[str]:
    return ACTIVITY_TO_KIND.get(activity_type)


def is_skill(activity_type: str) -> bool:
    return get_kind(activity_type) == KIND_SKILL


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_mappings(*, strict: bool = True) -> List[str]:
    """
    Validate that:
      - no label is listed twice within a kind
      - no label belongs to more than one kind
      - OVERALL is a skill and UNKNOWN is not a real label
    Returns a list of human-readable issues. If strict=True and issues exist, raises ValueError.
    """
    issues: List[str] = []

    seen: Dict[str, str] = {}
    for kind in KIND_ORDER:
        labels = _TYPES_BY_KIND[kind]
        dupes = sorted({label for label in labels if list(labels).count(label) > 1})
        if dupes:
            issues.append(f"{kind} types listed more than once: {dupes}")
        for label in labels:
            other = seen.get(label)
            if other is not None and other != kind:
                issues.append(f"'{label}' belongs to both {other} and {kind}")
            seen.setdefault(label, kind)

    if ACTIVITY_TO_KIND.get(OVERALL) != KIND_SKILL:
        issues.append(f"{OVERALL} must be a skill activity type")
    if UNKNOWN in ACTIVITY_TO_KIND:
        issues.append(f"{UNKNOWN} must not be a listed activity type")

    if strict and issues:
        raise ValueError("Activity type validation failed:\n- " + "\n- ".join(issues))
    return issues
