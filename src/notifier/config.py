"""
Notifier configuration using Pydantic Settings.

Process-wide defaults for notification placement, capacity and timing.
The active NotifierConfig is owned by the NotificationStore and changed
through notify.configure().
"""

from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notifier.constants import Defaults, NotifyPosition


class NotifierConfig(BaseSettings):
    """
    Notifier settings with validation.

    All settings can be overridden via environment variables with NOTIFIER_ prefix.

    Example:
        # Via environment variables:
        NOTIFIER_MAX_VISIBLE=3
        NOTIFIER_DEFAULT_DURATION=5000
        NOTIFIER_POSITION=top-right
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTIFIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    position: NotifyPosition = Field(
        default=Defaults.POSITION,
        description="Screen anchor for the notification stack",
    )
    max_visible: int = Field(
        default=Defaults.MAX_VISIBLE,
        ge=1,
        description="Maximum notifications visible at once; oldest are replaced",
    )
    default_duration: float = Field(
        default=Defaults.DURATION_MS,
        ge=0,
        description="Auto-dismiss delay in ms for terminal states (0 = persistent)",
    )
    swipe_to_dismiss: bool = Field(default=True, description="Enable swipe-to-dismiss")
    pause_on_hover: bool = Field(default=True, description="Pause auto-dismiss on hover")
    click_to_dismiss: bool = Field(default=False, description="Dismiss on click anywhere")
    dismissible: bool = Field(default=True, description="Show a close affordance")
    offset: int = Field(default=Defaults.OFFSET_PX, ge=0, description="Edge offset in px")
    gap: int = Field(default=Defaults.GAP_PX, ge=0, description="Spacing between items in px")
    exit_grace_ms: float = Field(
        default=Defaults.EXIT_GRACE_MS,
        ge=0,
        description="Delay between hiding a dismissed item and removing it (exit animation)",
    )

    def merged(self, **changes: Any) -> "NotifierConfig":
        """
        Return a validated copy with changes applied over the current values.

        Raises:
            ValidationError: If a value is invalid or a key is not a config field
        """
        unknown = [key for key in changes if key not in type(self).model_fields]
        if unknown:
            raise ValidationError.from_exception_data(
                type(self).__name__,
                [
                    {"type": "extra_forbidden", "loc": (key,), "input": changes[key]}
                    for key in unknown
                ],
            )

        values = self.model_dump()
        values.update(changes)
        return type(self)(**values)
