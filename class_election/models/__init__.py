# Central import surface for SQLModel table registration.

from .setting import DEFAULT_PHASE, PHASE_KEY, Phase, Setting
from .user import User
from .candidate import Candidate, Gender
from .vote import Vote

__all__ = [
    "DEFAULT_PHASE",
    "PHASE_KEY",
    "Phase",
    "Setting",
    "User",
    "Candidate",
    "Gender",
    "Vote",
]
