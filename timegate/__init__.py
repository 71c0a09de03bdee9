"""
timegate: business-hours write gating for protected registries, with an
append-only, hash-chained audit log of every rejected attempt, plus a small
patient admission service.
"""

__all__ = [
    "Decision",
    "DenialReason",
    "evaluate",
]

from .app.domain.policy import Decision, DenialReason, evaluate

__version__ = "0.1.0"
