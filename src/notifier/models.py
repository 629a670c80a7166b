"""
Notification data models.

Pydantic models for the per-item option surface (options, actions,
confirm labels, promise messages) and the NotifyItem record the store
keeps for every live notification.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from notifier.constants import Defaults, DismissReason, NotifyPosition, NotifyState

logger = structlog.get_logger(__name__)

OnOpenCallback = Callable[[str], Any]
OnCloseCallback = Callable[[str], Any]
OnDismissCallback = Callable[[str, DismissReason], Any]
OnUpdateCallback = Callable[[str, NotifyState, NotifyState], Any]
ConfirmResolver = Callable[[bool], Any]


class NotifyAction(BaseModel):
    """Action button rendered inside a notification."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., min_length=1)
    on_click: Callable[[], Any]


class ConfirmOptions(BaseModel):
    """Button labels for a confirm prompt."""

    model_config = ConfigDict(frozen=True)

    confirm_label: str = Defaults.CONFIRM_LABEL
    cancel_label: str = Defaults.CANCEL_LABEL


class NotifyOptions(BaseModel):
    """
    Per-notification behavior overrides.

    Every field is optional; only fields that were explicitly supplied take
    part in a merge, so `NotifyOptions(duration=0)` overrides the duration
    and nothing else.

    Attributes:
        message: Message used by notify() when no positional message is given
        position: Screen anchor for this item
        duration: Auto-dismiss delay in ms (0 disables auto-dismiss)
        dismissible: Whether a close affordance is shown
        pause_on_hover: Whether hovering pauses the auto-dismiss timer
        swipe_to_dismiss: Whether a swipe gesture dismisses the item
        click_to_dismiss: Whether clicking anywhere dismisses the item
        action: Optional action button
        confirm: Labels for confirm prompts
        loading_message / success_message / error_message: Fallback messages
            used by the chain methods when called without a message
        on_open / on_close / on_dismiss / on_update: Lifecycle callbacks
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: Optional[str] = None
    position: Optional[NotifyPosition] = None
    duration: Optional[float] = None
    dismissible: Optional[bool] = None
    pause_on_hover: Optional[bool] = None
    swipe_to_dismiss: Optional[bool] = None
    click_to_dismiss: Optional[bool] = None
    action: Optional[NotifyAction] = None
    confirm: Optional[ConfirmOptions] = None
    loading_message: Optional[str] = None
    success_message: Optional[str] = None
    error_message: Optional[str] = None
    on_open: Optional[OnOpenCallback] = None
    on_close: Optional[OnCloseCallback] = None
    on_dismiss: Optional[OnDismissCallback] = None
    on_update: Optional[OnUpdateCallback] = None

    @field_validator("duration")
    @classmethod
    def drop_invalid_duration(cls, v: Optional[float]) -> Optional[float]:
        """Negative or non-finite durations fall back to the configured default."""
        if v is None:
            return None
        if not math.isfinite(v) or v < 0:
            logger.warning("invalid_duration_ignored", duration=v)
            return None
        return v

    def merge(self, other: Optional["NotifyOptions"]) -> "NotifyOptions":
        """
        Return a copy of these options with the fields set on `other` applied.

        An action already present survives unless `other` supplies a new one.
        """
        if other is None:
            return self
        update = {name: getattr(other, name) for name in other.model_fields_set}
        if update.get("action") is None and self.action is not None:
            update.pop("action", None)
        if not update:
            return self
        return self.model_copy(update=update)


def build_options(options: Optional[NotifyOptions] = None, **fields: Any) -> NotifyOptions:
    """Combine an options model and keyword overrides into one NotifyOptions."""
    base = options if options is not None else NotifyOptions()
    if not fields:
        return base
    return base.merge(NotifyOptions(**fields))


class PromiseOptions(BaseModel):
    """Messages for a tracked awaitable.

    success and error accept either a static string or a function of the
    result (or raised exception) returning the message.
    """

    model_config = ConfigDict(frozen=True)

    loading: Optional[str] = None
    success: Optional[str | Callable[[Any], str]] = None
    error: Optional[str | Callable[[BaseException], str]] = None


@dataclass(frozen=True)
class NotifyItem:
    """
    Snapshot of one notification's lifecycle state.

    The store replaces the record on every mutation, so an item obtained
    from get_notification() never changes underneath its holder.
    Timestamps are scheduler milliseconds.
    """

    id: str
    state: NotifyState
    message: str
    options: NotifyOptions
    created_at: float
    state_started_at: float
    visible: bool = True
    prev_state: NotifyState = NotifyState.IDLE
    confirm_resolver: Optional[ConfirmResolver] = None
    paused: bool = False
    remaining_time: Optional[float] = None
