"""
Reactive Notification Store.

Single source of truth for every live notification. All mutations go
through the store, which updates the id -> NotifyItem mapping, schedules
auto-dismiss and removal timers, and synchronously notifies subscribed
listeners after each change.

Architecture:
-------------
- Upsert semantics: set_state / set_confirm_state create the item on first use
- Auto-dismiss: success, error and info items are dismissed after their
  duration (0 = persistent); pause/resume keeps the remaining time
- Two-phase removal: dismiss() hides the item (visible=False) and deletes it
  after config.exit_grace_ms, leaving room for an exit animation
- Confirm protocol: a resolver parked on the item is called exactly once,
  with the user's choice or False on dismissal
- Listeners are zero-argument callables invoked in registration order

Callback ordering:
------------------
- Callbacks run after the new record is stored; a callback writing to the
  same id builds on it, and the store does not overwrite that write
- on_update (state change) and on_open (new item) run before the broadcast
- on_dismiss runs before the hide broadcast
- on_close runs before the removal broadcast
"""

from collections.abc import Callable
from dataclasses import replace
from typing import Any, Optional

import structlog

from notifier import metrics
from notifier.config import NotifierConfig
from notifier.constants import AUTO_DISMISS_STATES, DismissReason, NotifyState
from notifier.models import ConfirmResolver, NotifyItem, NotifyOptions, build_options
from notifier.timers import AsyncioScheduler, Scheduler, TimerRegistry

logger = structlog.get_logger(__name__)

StoreListener = Callable[[], Any]


class NotificationStore:
    """
    Store for notification items, listeners and timers.

    Example:
        >>> store = NotificationStore()
        >>> unsubscribe = store.subscribe(lambda: render(store.get_notifications()))
        >>> store.set_state("upload", NotifyState.LOADING, "Uploading...")
        >>> store.set_state("upload", NotifyState.SUCCESS, "Uploaded")
        >>> store.dismiss("upload", DismissReason.CLICK)
    """

    def __init__(
        self,
        config: Optional[NotifierConfig] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        """
        Initialize an empty store.

        Args:
            config: Notifier configuration (default: NotifierConfig())
            scheduler: Clock and timer source (default: AsyncioScheduler on the running loop)
        """
        self.config = config if config is not None else NotifierConfig()
        self.scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._notifications: dict[str, NotifyItem] = {}
        self._listeners: list[StoreListener] = []
        self._dismiss_timers = TimerRegistry(self.scheduler)
        self._removal_timers = TimerRegistry(self.scheduler)
        self.logger = logger.bind(component="NotificationStore")

    # =============================
    # Read accessors
    # =============================

    def get_notifications(self) -> list[NotifyItem]:
        """Return all resident notifications ordered by creation time."""
        return sorted(self._notifications.values(), key=lambda item: item.created_at)

    def get_notification(self, notification_id: str) -> Optional[NotifyItem]:
        return self._notifications.get(notification_id)

    def has_active_timer(self, notification_id: str) -> bool:
        """Whether an auto-dismiss timer is pending for the id."""
        return self._dismiss_timers.is_active(notification_id)

    def __len__(self) -> int:
        return len(self._notifications)

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._notifications

    # =============================
    # Listeners
    # =============================

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """
        Register a listener called after every mutation.

        Args:
            listener: Zero-argument callable

        Returns:
            Function that detaches the listener
        """
        if listener not in self._listeners:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                self.logger.exception("listener_failed", listener=repr(listener))

    def _invoke(self, name: str, callback: Callable[..., Any], *args: Any) -> None:
        try:
            callback(*args)
        except Exception:
            self.logger.exception(
                "callback_failed",
                callback=name,
                notification_id=args[0] if args else None,
            )

    # =============================
    # State transitions
    # =============================

    def effective_duration(self, options: NotifyOptions) -> float:
        """Duration in ms for options, falling back to config.default_duration."""
        if options.duration is None:
            return self.config.default_duration
        return options.duration

    def set_state(
        self,
        notification_id: str,
        state: NotifyState | str,
        message: str,
        options: Optional[NotifyOptions] = None,
        **option_fields: Any,
    ) -> NotifyItem:
        """
        Create or update a notification.

        Lifecycle callbacks run after the item is stored, so a callback that
        writes to the same id builds on this update and its write stands.

        Args:
            notification_id: Notification id (created if unknown)
            state: New state (confirm goes through set_confirm_state)
            message: Message to display
            options: Options merged over the existing ones
            **option_fields: Individual option overrides

        Returns:
            The stored item, as left by any callback that wrote to it

        Raises:
            ValueError: If state is confirm
        """
        state = NotifyState(state)
        if state == NotifyState.CONFIRM:
            raise ValueError("confirm state requires a resolver; use set_confirm_state()")

        self._dismiss_timers.cancel(notification_id)
        self._cancel_pending_removal(notification_id)

        existing = self._notifications.get(notification_id)
        prev_state = existing.state if existing is not None else NotifyState.IDLE
        base_options = existing.options if existing is not None else NotifyOptions()
        merged = base_options.merge(build_options(options, **option_fields))
        is_state_change = existing is not None and state != prev_state

        now = self.scheduler.now()
        item = NotifyItem(
            id=notification_id,
            state=state,
            message=message,
            options=merged,
            created_at=existing.created_at if existing is not None else now,
            state_started_at=(
                now if existing is None or is_state_change else existing.state_started_at
            ),
            visible=True,
            prev_state=prev_state,
            confirm_resolver=None,
        )
        self._notifications[notification_id] = item
        self._record_upsert(existing, item)

        if is_state_change and merged.on_update is not None:
            self._invoke("on_update", merged.on_update, notification_id, state, prev_state)
        if existing is None and merged.on_open is not None:
            self._invoke("on_open", merged.on_open, notification_id)

        # Leaving confirm without a choice counts as cancelled
        if existing is not None and existing.confirm_resolver is not None:
            self._settle(existing.confirm_resolver, False)

        self._emit()

        current = self._notifications.get(notification_id)
        if current is None:
            return item
        if (
            current.visible
            and not current.paused
            and current.state in AUTO_DISMISS_STATES
            and not self._dismiss_timers.is_active(notification_id)
        ):
            duration = self.effective_duration(current.options)
            if duration != 0:
                self._arm_auto_dismiss(notification_id, duration)

        return current

    def set_confirm_state(
        self,
        notification_id: str,
        message: str,
        options: Optional[NotifyOptions],
        resolver: ConfirmResolver,
    ) -> NotifyItem:
        """
        Put a notification into the confirm state with a pending resolver.

        Confirm items never auto-dismiss. A resolver already parked on the
        item is settled with False before being replaced.
        """
        self._dismiss_timers.cancel(notification_id)
        self._cancel_pending_removal(notification_id)

        existing = self._notifications.get(notification_id)
        prev_state = existing.state if existing is not None else NotifyState.IDLE
        base_options = existing.options if existing is not None else NotifyOptions()
        merged = base_options.merge(options)
        is_state_change = existing is not None and prev_state != NotifyState.CONFIRM

        now = self.scheduler.now()
        item = NotifyItem(
            id=notification_id,
            state=NotifyState.CONFIRM,
            message=message,
            options=merged,
            created_at=existing.created_at if existing is not None else now,
            state_started_at=(
                now if existing is None or is_state_change else existing.state_started_at
            ),
            visible=True,
            prev_state=prev_state,
            confirm_resolver=resolver,
        )
        self._notifications[notification_id] = item
        self._record_upsert(existing, item)

        if is_state_change and merged.on_update is not None:
            self._invoke(
                "on_update", merged.on_update, notification_id, NotifyState.CONFIRM, prev_state
            )
        if existing is None and merged.on_open is not None:
            self._invoke("on_open", merged.on_open, notification_id)

        stale = existing.confirm_resolver if existing is not None else None
        if stale is not None and stale is not resolver:
            self._settle(stale, False)

        self._emit()
        current = self._notifications.get(notification_id)
        return current if current is not None else item

    def resolve_confirm(self, notification_id: str, confirmed: bool) -> None:
        """
        Resolve a pending confirm prompt.

        The resolver is detached before it is called, so only the first call
        has any effect. The item stays in the confirm state; the caller
        chains to the next state or dismisses it.
        """
        item = self._notifications.get(notification_id)
        if item is None or item.confirm_resolver is None:
            return

        resolver = item.confirm_resolver
        self._notifications[notification_id] = replace(item, confirm_resolver=None)
        self.logger.debug("confirm_resolved", notification_id=notification_id, confirmed=confirmed)
        self._settle(resolver, confirmed)
        self._emit()

    def update_options(
        self,
        notification_id: str,
        options: Optional[NotifyOptions] = None,
        **option_fields: Any,
    ) -> None:
        """Merge options into an existing item without touching state, message or timers."""
        item = self._notifications.get(notification_id)
        if item is None:
            return

        merged = item.options.merge(build_options(options, **option_fields))
        self._notifications[notification_id] = replace(item, options=merged)
        self._emit()

    # =============================
    # Timers
    # =============================

    def pause_timer(self, notification_id: str) -> None:
        """Pause the auto-dismiss timer, keeping the remaining time."""
        item = self._notifications.get(notification_id)
        if item is None or item.paused:
            return

        remaining = self._dismiss_timers.remaining(notification_id)
        if remaining is None:
            return

        self._dismiss_timers.cancel(notification_id)
        self._notifications[notification_id] = replace(item, paused=True, remaining_time=remaining)
        self.logger.debug("timer_paused", notification_id=notification_id, remaining_ms=remaining)
        self._emit()

    def resume_timer(self, notification_id: str) -> None:
        """Resume a paused timer for the time it had left."""
        item = self._notifications.get(notification_id)
        if item is None or not item.paused or not item.visible:
            return

        remaining = item.remaining_time
        if remaining is None:
            remaining = self.effective_duration(item.options)

        self._notifications[notification_id] = replace(
            item,
            paused=False,
            remaining_time=None,
            state_started_at=self.scheduler.now(),
        )
        if item.state in AUTO_DISMISS_STATES:
            self._arm_auto_dismiss(notification_id, remaining)

        self.logger.debug("timer_resumed", notification_id=notification_id, remaining_ms=remaining)
        self._emit()

    def _arm_auto_dismiss(self, notification_id: str, delay_ms: float) -> None:
        self._dismiss_timers.arm(
            notification_id,
            delay_ms,
            lambda: self.dismiss(notification_id, DismissReason.TIMEOUT),
        )

    # =============================
    # Dismissal
    # =============================

    def dismiss(
        self, notification_id: str, reason: DismissReason | str = DismissReason.MANUAL
    ) -> None:
        """
        Dismiss a notification in two phases.

        Hides the item immediately and removes it after config.exit_grace_ms.
        A pending confirm prompt is resolved with False. Items already on
        their way out are left alone. An on_dismiss callback that brings the
        item back (set_state on the same id) cancels the removal.
        """
        reason = DismissReason(reason)
        item = self._notifications.get(notification_id)
        if item is None or not item.visible:
            return

        self._dismiss_timers.cancel(notification_id)

        resolver = item.confirm_resolver
        self._notifications[notification_id] = replace(
            item,
            visible=False,
            confirm_resolver=None,
            paused=False,
            remaining_time=None,
        )
        if resolver is not None:
            self._settle(resolver, False)

        metrics.notifications_dismissed_total.labels(reason=reason.value).inc()
        self.logger.debug(
            "notification_dismissed",
            notification_id=notification_id,
            reason=reason.value,
            state=item.state.value,
        )

        if item.options.on_dismiss is not None:
            self._invoke("on_dismiss", item.options.on_dismiss, notification_id, reason)

        self._emit()

        current = self._notifications.get(notification_id)
        if current is None or current.visible:
            self.logger.debug("dismiss_superseded", notification_id=notification_id)
            return

        self._removal_timers.arm(
            notification_id,
            self.config.exit_grace_ms,
            lambda: self._remove(notification_id),
        )

    def dismiss_all(self, reason: DismissReason | str = DismissReason.MANUAL) -> None:
        """Dismiss every resident notification; each runs its own grace delay."""
        for notification_id in list(self._notifications):
            self.dismiss(notification_id, reason)

    def enforce_max_visible(self, max_visible: int, exclude_id: Optional[str] = None) -> None:
        """
        Evict the oldest visible notifications to make room for a new one.

        Args:
            max_visible: Capacity limit
            exclude_id: Id of the notification about to be created
        """
        visible = [
            item
            for item in self.get_notifications()
            if item.visible and item.id != exclude_id
        ]
        if len(visible) < max_visible:
            return

        evicted = visible[: len(visible) - max_visible + 1]
        self.logger.debug(
            "max_visible_enforced",
            max_visible=max_visible,
            visible_count=len(visible),
            evicted=[item.id for item in evicted],
        )
        for item in evicted:
            self.dismiss(item.id, DismissReason.REPLACED)

    def _remove(self, notification_id: str) -> None:
        item = self._notifications.pop(notification_id, None)
        if item is None:
            return

        if item.options.on_close is not None:
            self._invoke("on_close", item.options.on_close, notification_id)
        self.logger.debug("notification_removed", notification_id=notification_id)
        self._emit()

    def _cancel_pending_removal(self, notification_id: str) -> None:
        if self._removal_timers.cancel(notification_id):
            self.logger.debug("notification_revived", notification_id=notification_id)

    # =============================
    # Internals
    # =============================

    def _settle(self, resolver: ConfirmResolver, confirmed: bool) -> None:
        outcome = "confirmed" if confirmed else "cancelled"
        metrics.notification_confirmations_total.labels(outcome=outcome).inc()
        try:
            resolver(confirmed)
        except Exception:
            self.logger.exception("confirm_resolver_failed", confirmed=confirmed)

    def _record_upsert(self, existing: Optional[NotifyItem], item: NotifyItem) -> None:
        if existing is None:
            metrics.notifications_created_total.labels(state=item.state.value).inc()
            self.logger.debug(
                "notification_created",
                notification_id=item.id,
                state=item.state.value,
            )
        elif existing.state != item.state:
            metrics.notification_transitions_total.labels(
                from_state=existing.state.value,
                to_state=item.state.value,
            ).inc()
            self.logger.debug(
                "notification_transitioned",
                notification_id=item.id,
                from_state=existing.state.value,
                to_state=item.state.value,
            )

    def reset(self) -> None:
        """
        Cancel all timers and clear items and listeners (for testing).

        Pending confirm prompts are resolved with False.
        """
        self._dismiss_timers.cancel_all()
        self._removal_timers.cancel_all()
        pending = [
            item.confirm_resolver
            for item in self._notifications.values()
            if item.confirm_resolver is not None
        ]
        self._notifications.clear()
        self._listeners.clear()
        for resolver in pending:
            self._settle(resolver, False)


# Singleton instance for the process-wide store
_store_instance: NotificationStore | None = None


def get_store() -> NotificationStore:
    """
    Get the singleton notification store.

    Returns:
        NotificationStore: The process-wide store
    """
    global _store_instance
    if _store_instance is None:
        _store_instance = NotificationStore()
    return _store_instance


def reset_store(store: Optional[NotificationStore] = None) -> NotificationStore:
    """
    Reset the singleton store (for testing).

    Clears the current store and installs `store`, or a fresh default store.
    """
    global _store_instance
    if _store_instance is not None:
        _store_instance.reset()
    _store_instance = store if store is not None else NotificationStore()
    return _store_instance
