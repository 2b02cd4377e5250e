from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Physician:
    name: str
    image: str


# Static roster shown in the physician picker; read-only
PHYSICIANS: List[Physician] = [
    Physician(name="John Green", image="/assets/images/dr-green.png"),
    Physician(name="Leila Cameron", image="/assets/images/dr-cameron.png"),
    Physician(name="David Livingston", image="/assets/images/dr-livingston.png"),
    Physician(name="Evan Peter", image="/assets/images/dr-peter.png"),
    Physician(name="Jane Powell", image="/assets/images/dr-powell.png"),
    Physician(name="Alex Ramirez", image="/assets/images/dr-remirez.png"),
    Physician(name="Jasmine Lee", image="/assets/images/dr-lee.png"),
    Physician(name="Alyana Cruz", image="/assets/images/dr-cruz.png"),
    Physician(name="Hardik Sharma", image="/assets/images/dr-sharma.png"),
]


def find_physician(name: Optional[str], roster: Optional[List[Physician]] = None) -> Optional[Physician]:
    """Resolve a stored ``primaryPhysician`` to its roster entry, for display only."""
    if not name:
        return None
    return next((p for p in (roster if roster is not None else PHYSICIANS) if p.name == name), None)
