"""Static spec -> role lookup used when a provider row carries no role."""

from typing import Optional

from tierlist.core.enums import Role

# Keys have whitespace removed ("Beast Mastery" -> "BeastMastery").
# Holy and Restoration are healers for every class that has them.
SPEC_ROLE_MAP: dict[str, Role] = {
    # DPS
    "Arcane": Role.DPS,
    "Fire": Role.DPS,
    "Frost": Role.DPS,
    "Affliction": Role.DPS,
    "Demonology": Role.DPS,
    "Destruction": Role.DPS,
    "Assassination": Role.DPS,
    "Outlaw": Role.DPS,
    "Subtlety": Role.DPS,
    "Marksmanship": Role.DPS,
    "BeastMastery": Role.DPS,
    "Survival": Role.DPS,
    "Elemental": Role.DPS,
    "Enhancement": Role.DPS,
    "Retribution": Role.DPS,
    "Shadow": Role.DPS,
    "Devastation": Role.DPS,
    "Augmentation": Role.DPS,
    "Fury": Role.DPS,
    "Arms": Role.DPS,
    "Havoc": Role.DPS,
    "Unholy": Role.DPS,
    "Windwalker": Role.DPS,
    "Feral": Role.DPS,
    "Balance": Role.DPS,
    # Tanks
    "Protection": Role.TANK,
    "Vengeance": Role.TANK,
    "Blood": Role.TANK,
    "Brewmaster": Role.TANK,
    "Guardian": Role.TANK,
    # Healers
    "Holy": Role.HEALER,
    "Discipline": Role.HEALER,
    "Mistweaver": Role.HEALER,
    "Restoration": Role.HEALER,
    "Preservation": Role.HEALER,
}


def get_role_for_spec(spec_name: str) -> Optional[Role]:
    """Look up the role of a spec name, ignoring whitespace."""
    return SPEC_ROLE_MAP.get("".join(spec_name.split()))
