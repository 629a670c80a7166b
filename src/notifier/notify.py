"""
Chainable notification facade.

Public entry point for creating and driving notifications. Every call on the
Notifier creates a fresh id, makes room under the max_visible limit, merges
the configured defaults with call-site options and hands off to the store.
The returned NotifyInstance re-enters the store under the same id, so

    n = notify.loading("Saving...")
    n.success("Saved")

produces one notification that transitions from loading to success.

Usage:
------
    from notifier import notify

    notify("Hello")
    notify.success("Profile updated", duration=5000)
    notify.error("Upload failed", action=NotifyAction(label="Retry", on_click=retry))

    result = await notify.promise(fetch_report(), success="Report ready")
    confirmed = await notify.confirm("Delete project?", confirm_label="Delete")

    notify.configure(max_visible=3, position="top-right")
    notify.dismiss()  # all
"""

import asyncio
from collections.abc import Awaitable
from typing import Any, Optional, TypeVar

import structlog

from notifier import metrics
from notifier.config import NotifierConfig
from notifier.constants import Defaults, DismissReason, NotifyState
from notifier.models import ConfirmOptions, NotifyOptions, PromiseOptions, build_options
from notifier.store import NotificationStore, get_store
from notifier.utils import generate_id, get_error_message

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class NotifyInstance:
    """
    Handle for a single notification id.

    State methods return the instance itself so calls can be chained.
    """

    def __init__(self, notifier: "Notifier", notification_id: str, options: NotifyOptions) -> None:
        self.id = notification_id
        self._notifier = notifier
        self._options = options

    @property
    def options(self) -> NotifyOptions:
        """Options applied on every state change made through this instance."""
        return self._options

    @property
    def store(self) -> NotificationStore:
        return self._notifier.store

    def loading(self, message: Optional[str] = None) -> "NotifyInstance":
        if message is None:
            message = self._options.loading_message or Defaults.LOADING_MESSAGE
        self.store.set_state(self.id, NotifyState.LOADING, message, self._options)
        return self

    def success(self, message: Optional[str] = None) -> "NotifyInstance":
        if message is None:
            message = self._options.success_message or Defaults.SUCCESS_MESSAGE
        self.store.set_state(self.id, NotifyState.SUCCESS, message, self._options)
        return self

    def error(self, message: Optional[str] = None) -> "NotifyInstance":
        if message is None:
            message = self._options.error_message or Defaults.ERROR_MESSAGE
        self.store.set_state(self.id, NotifyState.ERROR, message, self._options)
        return self

    def info(self, message: Optional[str] = None) -> "NotifyInstance":
        if message is None:
            message = Defaults.INFO_MESSAGE
        self.store.set_state(self.id, NotifyState.INFO, message, self._options)
        return self

    def dismiss(self) -> "NotifyInstance":
        self.store.dismiss(self.id, DismissReason.MANUAL)
        return self

    def update(
        self, options: Optional[NotifyOptions] = None, **option_fields: Any
    ) -> "NotifyInstance":
        """Update options locally (for later chain calls) and on the stored item."""
        changes = build_options(options, **option_fields)
        self._options = self._options.merge(changes)
        self.store.update_options(self.id, changes)
        return self

    async def promise(
        self,
        awaitable: Awaitable[T],
        options: Optional[PromiseOptions] = None,
        **messages: Any,
    ) -> T:
        """
        Track an awaitable: loading while pending, then success or error.

        Args:
            awaitable: Coroutine, task or future to await
            options: Loading/success/error messages
            **messages: Same fields as PromiseOptions

        Returns:
            The awaitable's result

        Raises:
            Whatever the awaitable raises, after the error state is shown
        """
        opts = options if options is not None else PromiseOptions(**messages)
        self.loading(opts.loading)

        try:
            result = await awaitable
        except Exception as exc:
            if callable(opts.error):
                message = opts.error(exc)
            elif opts.error is not None:
                message = opts.error
            else:
                fallback = self._options.error_message or Defaults.ERROR_MESSAGE
                message = get_error_message(exc, fallback)
            self.error(message)
            metrics.notification_promises_total.labels(outcome="rejected").inc()
            logger.debug("promise_rejected", notification_id=self.id, error_type=type(exc).__name__)
            raise

        if callable(opts.success):
            self.success(opts.success(result))
        else:
            self.success(opts.success)
        metrics.notification_promises_total.labels(outcome="fulfilled").inc()
        return result

    def confirm(
        self,
        message: str,
        options: Optional[ConfirmOptions] = None,
        **labels: Any,
    ) -> "asyncio.Future[bool]":
        """
        Show a confirm prompt and return a future for the user's choice.

        The future resolves with True/False once resolve_confirm() is called
        for this id, or with False if the notification is dismissed first.
        Must be called while an event loop is running.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[bool] = loop.create_future()

        def resolve(confirmed: bool) -> None:
            if not future.done():
                future.set_result(confirmed)

        confirm_options = options if options is not None else ConfirmOptions(**labels)
        self.store.set_confirm_state(
            self.id,
            message,
            self._options.merge(NotifyOptions(confirm=confirm_options)),
            resolve,
        )
        return future

    def __repr__(self) -> str:
        return f"NotifyInstance(id={self.id!r})"


class Notifier:
    """
    Callable notification facade.

    Bound to an explicit store, or to the process-wide store from
    get_store() when none is given.
    """

    def __init__(self, store: Optional[NotificationStore] = None) -> None:
        self._store = store

    @property
    def store(self) -> NotificationStore:
        return self._store if self._store is not None else get_store()

    def _default_options(self) -> NotifyOptions:
        config = self.store.config
        return NotifyOptions(
            position=config.position,
            duration=config.default_duration,
            dismissible=config.dismissible,
            swipe_to_dismiss=config.swipe_to_dismiss,
            pause_on_hover=config.pause_on_hover,
            click_to_dismiss=config.click_to_dismiss,
        )

    def _create(self, options: Optional[NotifyOptions] = None) -> NotifyInstance:
        store = self.store
        notification_id = generate_id()
        store.enforce_max_visible(store.config.max_visible, notification_id)
        return NotifyInstance(self, notification_id, self._default_options().merge(options))

    def __call__(
        self,
        message: Optional[str] = None,
        options: Optional[NotifyOptions] = None,
        **option_fields: Any,
    ) -> NotifyInstance:
        """
        Create an info notification.

        The message can be passed positionally or as options.message. Without
        any message the instance is returned without showing anything, ready
        for chaining.
        """
        resolved = build_options(options, **option_fields)
        if message is not None:
            resolved = resolved.merge(NotifyOptions(message=message))

        instance = self._create(resolved)
        if resolved.message:
            self.store.set_state(instance.id, NotifyState.INFO, resolved.message, instance.options)
        return instance

    def loading(
        self,
        message: Optional[str] = None,
        options: Optional[NotifyOptions] = None,
        **option_fields: Any,
    ) -> NotifyInstance:
        return self._create(build_options(options, **option_fields)).loading(message)

    def success(
        self,
        message: Optional[str] = None,
        options: Optional[NotifyOptions] = None,
        **option_fields: Any,
    ) -> NotifyInstance:
        return self._create(build_options(options, **option_fields)).success(message)

    def error(
        self,
        message: Optional[str] = None,
        options: Optional[NotifyOptions] = None,
        **option_fields: Any,
    ) -> NotifyInstance:
        return self._create(build_options(options, **option_fields)).error(message)

    def info(
        self,
        message: Optional[str] = None,
        options: Optional[NotifyOptions] = None,
        **option_fields: Any,
    ) -> NotifyInstance:
        return self._create(build_options(options, **option_fields)).info(message)

    def dismiss(self, notification_id: Optional[str] = None) -> None:
        """Dismiss one notification by id, or all of them when no id is given."""
        if notification_id:
            self.store.dismiss(notification_id, DismissReason.MANUAL)
        else:
            self.store.dismiss_all(DismissReason.MANUAL)

    async def promise(
        self,
        awaitable: Awaitable[T],
        options: Optional[PromiseOptions] = None,
        **messages: Any,
    ) -> T:
        """Track an awaitable in a new notification. See NotifyInstance.promise."""
        return await self._create().promise(awaitable, options, **messages)

    def confirm(
        self,
        message: str,
        options: Optional[ConfirmOptions] = None,
        **labels: Any,
    ) -> "asyncio.Future[bool]":
        """Show a confirm prompt in a new notification. See NotifyInstance.confirm."""
        return self._create().confirm(message, options, **labels)

    def resolve_confirm(self, notification_id: str, confirmed: bool) -> None:
        """Deliver the user's choice for a confirm prompt."""
        self.store.resolve_confirm(notification_id, confirmed)

    def configure(self, **changes: Any) -> NotifierConfig:
        """
        Update the process-wide notifier configuration.

        Raises:
            pydantic.ValidationError: If a value is invalid (configuration unchanged)
        """
        store = self.store
        store.config = store.config.merged(**changes)
        logger.info("notifier_configured", changes=sorted(changes))
        return store.config

    def get_config(self) -> NotifierConfig:
        return self.store.config


# Process-wide facade bound to get_store()
notify = Notifier()
