"""OpenF1 data models used by the qualifying pipeline."""

from f1quali.models.driver import Driver
from f1quali.models.lap import Lap
from f1quali.models.meeting import Meeting
from f1quali.models.race_control import RaceControl
from f1quali.models.session import Session
from f1quali.models.stint import Stint

__all__ = [
    "Driver",
    "Lap",
    "Meeting",
    "RaceControl",
    "Session",
    "Stint",
]
