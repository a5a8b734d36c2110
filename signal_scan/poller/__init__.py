"""Report status reconciliation engine.

- classifier: Raw response → ``Outcome``
- session: ``ReportSession`` state machine
- scheduler: ``PollScheduler`` fetch / re-schedule loop
- progress: ``ProgressEstimator`` cosmetic progress ticks
- lifecycle: ``ReportWatcher`` identifier-bound session controller
- timers: Injectable timer capability
"""

from signal_scan.poller.classifier import classify, classify_error
from signal_scan.poller.lifecycle import ReportWatcher
from signal_scan.poller.progress import ProgressEstimator
from signal_scan.poller.scheduler import PollScheduler
from signal_scan.poller.session import ReportSession
from signal_scan.poller.timers import AsyncioTimerScheduler, TimerHandle, TimerScheduler

__all__ = [
    "AsyncioTimerScheduler",
    "PollScheduler",
    "ProgressEstimator",
    "ReportSession",
    "ReportWatcher",
    "TimerHandle",
    "TimerScheduler",
    "classify",
    "classify_error",
]
