"""Bill of materials for furniture orders.

Only chairs are decomposed into sub-parts; every other furniture type is
fulfilled as a finished item and needs no components.
"""

from __future__ import annotations

CHAIR_CATEGORIES = frozenset({"chair", "chairs"})

# Units of each component per chair.
CHAIR_BILL_OF_MATERIALS: tuple[tuple[str, int], ...] = (
    ("back", 1),
    ("seat", 1),
    ("arm", 2),
    ("mechanism", 1),
    ("gaslift", 1),
    ("castor", 5),
    ("chrome", 1),
)

HEADREST = "headrest"


def compute_requirements(
    furniture_type: str | None,
    quantity: int,
    headrest: bool = False,
) -> dict[str, int]:
    """Map component type -> units needed for *quantity* pieces.

    ``quantity`` must already be validated.  The headrest entry is always
    present for chairs; it is zero when the option is not set.
    """
    if str(furniture_type or "").strip().lower() not in CHAIR_CATEGORIES:
        return {}

    needed = {component: per_unit * quantity for component, per_unit in CHAIR_BILL_OF_MATERIALS}
    needed[HEADREST] = quantity if headrest else 0
    return needed
