"""
Domain subpackage for the service request feature.
"""

from .lifecycle import ALLOWED_TRANSITIONS, allowed_targets, apply_transition, authorize_caller
from .models import RequestStatus, ServiceRequest

__all__ = [
    "ALLOWED_TRANSITIONS",
    "RequestStatus",
    "ServiceRequest",
    "allowed_targets",
    "apply_transition",
    "authorize_caller",
]
