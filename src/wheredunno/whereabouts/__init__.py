"""Whereabouts tracking and delayed answers."""

from .detector import (
    AI_ASSISTANT_ID,
    AI_QUERY_ID,
    ASSISTANT_IDS,
    WHEREABOUTS_ASSISTANT_ID,
    detect_query,
)
from .extractor import STOP_WORDS, WHEREABOUT_RULES, WhereaboutRule, extract_whereabout
from .models import PendingQuestion, QuestionOutcome, WhereaboutFact, WhereaboutQuery
from .responder import DelayedResponder
from .store import FactStore
from .tracker import TrackingResult, WhereaboutsTracker, render_response

__all__ = [
    "AI_ASSISTANT_ID",
    "AI_QUERY_ID",
    "ASSISTANT_IDS",
    "DelayedResponder",
    "FactStore",
    "PendingQuestion",
    "QuestionOutcome",
    "STOP_WORDS",
    "TrackingResult",
    "WHEREABOUTS_ASSISTANT_ID",
    "WHEREABOUT_RULES",
    "WhereaboutFact",
    "WhereaboutQuery",
    "WhereaboutRule",
    "WhereaboutsTracker",
    "detect_query",
    "extract_whereabout",
    "render_response",
]
