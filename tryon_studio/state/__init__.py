"""Wizard state and session history."""

from .machine import WizardStore, apply_event
from .history import HistoryStore

__all__ = [
    "WizardStore",
    "apply_event",
    "HistoryStore",
]
