# Models package (re-export table modules for stable imports)
from .patient import Patient
from .appointment import Appointment

__all__ = [
    "Patient",
    "Appointment",
]
