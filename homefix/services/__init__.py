from .intake import create_service_request
from .lifecycle import TRANSITIONS, TransitionPolicy, transition_status, update_admin_notes
from .matching import rank_candidates, candidates_for_request, assign_technician
from .notifications import Notifier, LoggingNotifier, get_notifier
from .ratings import submit_rating
from .realtime import ChangeFeed, RequestBoard

__all__ = [
    "create_service_request",
    "TRANSITIONS",
    "TransitionPolicy",
    "transition_status",
    "update_admin_notes",
    "rank_candidates",
    "candidates_for_request",
    "assign_technician",
    "Notifier",
    "LoggingNotifier",
    "get_notifier",
    "submit_rating",
    "ChangeFeed",
    "RequestBoard"
]
