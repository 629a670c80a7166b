"""
Toast-library compatibility adapters.

Adapters expose the call shapes of common toast APIs (a callable returning
an id, success/error/loading helpers, promise tracking) on top of the
notify facade, so code written against those APIs can drive the store
unchanged.

Presets:
--------
- sonner_toast: 4000 ms duration
- hot_toast: 4000 ms duration, top-center position
- use_toast(): title/description/variant call shape with a destructive
  variant mapped to an error notification
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Optional, TypeVar, Union

from notifier.constants import Defaults, NotifyPosition
from notifier.models import NotifyOptions, PromiseOptions, build_options
from notifier.notify import Notifier
from notifier.notify import notify as default_notifier

T = TypeVar("T")

AwaitableOrFactory = Union[Awaitable[T], Callable[[], Awaitable[T]]]


def _message_text(message: Any) -> str:
    if isinstance(message, str):
        return message
    return str(message)


class ToastAdapter:
    """
    Toast-style API over a Notifier.

    Every creating call returns the notification id rather than an instance.

    Example:
        >>> toast = create_toast_adapter(NotifyOptions(duration=4000))
        >>> toast_id = toast.success("Saved")
        >>> toast.dismiss(toast_id)
    """

    def __init__(
        self,
        default_options: Optional[NotifyOptions] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.default_options = default_options if default_options is not None else NotifyOptions()
        self.notifier = notifier if notifier is not None else default_notifier

    def _options(
        self, options: Optional[NotifyOptions], option_fields: dict[str, Any]
    ) -> NotifyOptions:
        return self.default_options.merge(build_options(options, **option_fields))

    def __call__(
        self, message: Any, options: Optional[NotifyOptions] = None, **option_fields: Any
    ) -> str:
        opts = self._options(options, option_fields)
        return self.notifier(_message_text(message), opts).id

    def success(
        self, message: Any, options: Optional[NotifyOptions] = None, **option_fields: Any
    ) -> str:
        opts = self._options(options, option_fields)
        return self.notifier.success(_message_text(message), opts).id

    def error(
        self, message: Any, options: Optional[NotifyOptions] = None, **option_fields: Any
    ) -> str:
        opts = self._options(options, option_fields)
        return self.notifier.error(_message_text(message), opts).id

    def loading(
        self, message: Any, options: Optional[NotifyOptions] = None, **option_fields: Any
    ) -> str:
        opts = self._options(options, option_fields)
        return self.notifier.loading(_message_text(message), opts).id

    def info(
        self, message: Any, options: Optional[NotifyOptions] = None, **option_fields: Any
    ) -> str:
        opts = self._options(options, option_fields)
        return self.notifier.info(_message_text(message), opts).id

    def dismiss(self, toast_id: Optional[Union[str, int]] = None) -> None:
        self.notifier.dismiss(str(toast_id) if toast_id is not None else None)

    async def promise(
        self,
        awaitable: AwaitableOrFactory[T],
        loading: str = Defaults.LOADING_MESSAGE,
        success: Union[str, Callable[[Any], str]] = Defaults.SUCCESS_MESSAGE,
        error: Union[str, Callable[[BaseException], str]] = Defaults.ERROR_MESSAGE,
    ) -> T:
        """
        Track an awaitable, or a zero-argument function returning one.

        Raises:
            Whatever the awaitable raises
        """
        if not inspect.isawaitable(awaitable) and callable(awaitable):
            awaitable = awaitable()
        options = PromiseOptions(loading=loading, success=success, error=error)
        return await self.notifier.promise(awaitable, options)


def create_toast_adapter(
    default_options: Optional[NotifyOptions] = None,
    notifier: Optional[Notifier] = None,
) -> ToastAdapter:
    """Create a ToastAdapter with default options applied to every call."""
    return ToastAdapter(default_options=default_options, notifier=notifier)


sonner_toast = create_toast_adapter(NotifyOptions(duration=4000))

hot_toast = create_toast_adapter(
    NotifyOptions(duration=4000, position=NotifyPosition.TOP_CENTER)
)


class ToastHook:
    """title/description/variant call shape."""

    def __init__(self, notifier: Optional[Notifier] = None) -> None:
        self.notifier = notifier if notifier is not None else default_notifier

    def toast(
        self,
        title: Any,
        description: Optional[str] = None,
        variant: Optional[str] = None,
        **option_fields: Any,
    ) -> str:
        """
        Show a notification.

        The destructive variant becomes an error notification titled `title`;
        otherwise title and description are joined into one info message.
        """
        options = build_options(**option_fields)
        if variant == "destructive":
            return self.notifier.error(_message_text(title), options).id

        message = _message_text(title)
        if description:
            message = f"{message} - {description}"
        return self.notifier(message, options).id

    def dismiss(self, toast_id: Optional[str] = None) -> None:
        self.notifier.dismiss(toast_id)


def use_toast(notifier: Optional[Notifier] = None) -> ToastHook:
    return ToastHook(notifier)
