from __future__ import annotations

from enum import Enum

from sqlmodel import SQLModel, Field


PHASE_KEY = "phase"


class Phase(str, Enum):
    """
    Election phase. Any phase may follow any phase; admins switch freely.
    """

    REGISTRATION = "registration"
    VOTING = "voting"
    RESULTS = "results"


DEFAULT_PHASE = Phase.REGISTRATION


class Setting(SQLModel, table=True):
    """
    Key/value configuration row. Only "phase" is used today.
    """

    __tablename__ = "settings"

    key: str = Field(primary_key=True, max_length=64)
    value: str
