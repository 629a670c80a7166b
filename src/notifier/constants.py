"""
Notification constants.

Enumerations for notification states, dismissal reasons and screen
positions, plus the default values shared by the store and the facade.
"""

from enum import Enum


class NotifyState(str, Enum):
    """Lifecycle state of a notification.

    - IDLE: Not yet shown (only ever seen as a prev_state)
    - LOADING: Spinner, never auto-dismisses
    - SUCCESS / ERROR / INFO: Terminal states, auto-dismiss after duration
    - CONFIRM: Waiting for a confirm/cancel choice, never auto-dismisses
    """

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    CONFIRM = "confirm"


AUTO_DISMISS_STATES = frozenset({NotifyState.SUCCESS, NotifyState.ERROR, NotifyState.INFO})


class DismissReason(str, Enum):
    """Why a notification was dismissed, passed to on_dismiss."""

    TIMEOUT = "timeout"  # Duration elapsed
    SWIPE = "swipe"  # Swipe gesture
    CLICK = "click"  # Click anywhere (click_to_dismiss)
    MANUAL = "manual"  # Programmatic dismiss()
    REPLACED = "replaced"  # Evicted by the max_visible limit


class NotifyPosition(str, Enum):
    """Screen anchor for the notification stack."""

    TOP = "top"
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    BOTTOM = "bottom"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"


class Defaults:
    """Default values for configuration, messages and labels."""

    DURATION_MS = 3000
    POSITION = NotifyPosition.BOTTOM
    MAX_VISIBLE = 5
    EXIT_GRACE_MS = 300
    OFFSET_PX = 24
    GAP_PX = 8

    LOADING_MESSAGE = "Loading..."
    SUCCESS_MESSAGE = "Success"
    ERROR_MESSAGE = "Error"
    INFO_MESSAGE = "Info"

    CONFIRM_LABEL = "Confirm"
    CANCEL_LABEL = "Cancel"
