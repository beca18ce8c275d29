"""Match states shared by the AI and human loops."""

from __future__ import annotations

import enum


class MatchStatus(enum.IntEnum):
    NEW = 0
    INIT = 1
    CREATE_LEVEL = 2
    AIM = 3
    SHOT = 4
    DATA_COLLECT_INIT = 11
    DATA_COLLECT_WORK = 12
    DATA_COLLECT_SAVE = 13
    MODEL_TRAIN = 21
    MODEL_LOAD = 22
    MODEL_SAVE = 23
    MODEL_WAIT = 30


USER_REQUEST_STATES = frozenset({MatchStatus.AIM, MatchStatus.SHOT})
