"""Generation orchestration and the studio session."""

from .notifier import Notifier, LoggingNotifier, NoticeBoard
from .orchestrator import GenerationOrchestrator
from .studio import TryOnStudio, ResultExport

__all__ = [
    "Notifier",
    "LoggingNotifier",
    "NoticeBoard",
    "GenerationOrchestrator",
    "TryOnStudio",
    "ResultExport",
]
