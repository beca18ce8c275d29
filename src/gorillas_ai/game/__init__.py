"""Match state machines for AI and human play."""

from .ai_match import AIMatch
from .human_match import HumanMatch, PointerState
from .status import MatchStatus

__all__ = ["AIMatch", "HumanMatch", "MatchStatus", "PointerState"]
