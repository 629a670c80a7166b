"""
Notifier: reactive notification store with a chainable facade.

Typical usage:

    from notifier import notify

    n = notify.loading("Saving...")
    n.success("Saved")
"""

from notifier.config import NotifierConfig
from notifier.constants import (
    AUTO_DISMISS_STATES,
    Defaults,
    DismissReason,
    NotifyPosition,
    NotifyState,
)
from notifier.logging_config import configure_logging
from notifier.models import (
    ConfirmOptions,
    NotifyAction,
    NotifyItem,
    NotifyOptions,
    PromiseOptions,
)
from notifier.notify import Notifier, NotifyInstance, notify
from notifier.store import NotificationStore, get_store, reset_store
from notifier.timers import AsyncioScheduler, Scheduler, TimerRegistry
from notifier.utils import generate_id, get_error_message

__version__ = "0.1.0"

__all__ = [
    "AUTO_DISMISS_STATES",
    "AsyncioScheduler",
    "ConfirmOptions",
    "Defaults",
    "DismissReason",
    "NotificationStore",
    "NotifierConfig",
    "Notifier",
    "NotifyAction",
    "NotifyInstance",
    "NotifyItem",
    "NotifyOptions",
    "NotifyPosition",
    "NotifyState",
    "PromiseOptions",
    "Scheduler",
    "TimerRegistry",
    "configure_logging",
    "generate_id",
    "get_error_message",
    "get_store",
    "notify",
    "reset_store",
]
