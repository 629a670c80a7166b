"""
Unit tests for the toast-library compatibility adapters.
"""

import pytest

from notifier.compat import ToastAdapter, create_toast_adapter, hot_toast, sonner_toast, use_toast
from notifier.constants import NotifyPosition, NotifyState
from notifier.models import NotifyOptions


@pytest.fixture
def toast(notifier) -> ToastAdapter:
    return create_toast_adapter(NotifyOptions(duration=4000), notifier=notifier)


class TestToastAdapter:
    """Test the id-returning toast API."""

    @pytest.mark.parametrize(
        "method, state",
        [
            ("success", NotifyState.SUCCESS),
            ("error", NotifyState.ERROR),
            ("loading", NotifyState.LOADING),
            ("info", NotifyState.INFO),
        ],
    )
    def test_helpers_return_ids(self, toast, store, method, state):
        toast_id = getattr(toast, method)("Hello")

        item = store.get_notification(toast_id)
        assert item.state == state
        assert item.message == "Hello"
        assert item.options.duration == 4000

    def test_call_creates_info(self, toast, store):
        item = store.get_notification(toast("Plain"))
        assert item.state == NotifyState.INFO

    def test_non_string_message_converted(self, toast, store):
        assert store.get_notification(toast.success(42)).message == "42"

    def test_call_site_options_win(self, toast, store):
        toast_id = toast.success("Saved", duration=0)
        assert store.get_notification(toast_id).options.duration == 0

    def test_dismiss_one_and_all(self, toast, store):
        first = toast.loading("A")
        second = toast.loading("B")

        toast.dismiss(first)
        assert store.get_notification(first).visible is False
        assert store.get_notification(second).visible is True

        toast.dismiss()
        assert store.get_notification(second).visible is False

    @pytest.mark.asyncio
    async def test_promise_with_awaitable(self, toast, store):
        async def work():
            return "report"

        result = await toast.promise(work(), loading="Loading", success="Loaded", error="Failed")

        assert result == "report"
        assert store.get_notifications()[0].message == "Loaded"

    @pytest.mark.asyncio
    async def test_promise_with_factory(self, toast, store):
        async def work():
            raise ConnectionError("offline")

        with pytest.raises(ConnectionError):
            await toast.promise(work, error=lambda exc: f"Failed: {exc}")

        item = store.get_notifications()[0]
        assert item.state == NotifyState.ERROR
        assert item.message == "Failed: offline"


class TestPresets:
    """Test the preset adapters bound to the process-wide store."""

    def test_sonner_duration(self, store):
        item = store.get_notification(sonner_toast.success("Saved"))

        assert item.options.duration == 4000
        assert item.options.position == NotifyPosition.BOTTOM

    def test_hot_toast_position(self, store):
        item = store.get_notification(hot_toast.error("Failed"))

        assert item.options.duration == 4000
        assert item.options.position == NotifyPosition.TOP_CENTER


class TestUseToast:
    """Test the title/description/variant hook."""

    def test_title_and_description_joined(self, notifier, store):
        hook = use_toast(notifier)

        item = store.get_notification(hook.toast("Saved", description="3 files"))

        assert item.state == NotifyState.INFO
        assert item.message == "Saved - 3 files"

    def test_title_only(self, notifier, store):
        item = store.get_notification(use_toast(notifier).toast("Saved"))
        assert item.message == "Saved"

    def test_destructive_variant_is_error(self, notifier, store):
        hook = use_toast(notifier)

        item = store.get_notification(
            hook.toast("Delete failed", description="Permission denied", variant="destructive")
        )

        assert item.state == NotifyState.ERROR
        assert item.message == "Delete failed"

    def test_options_passed_through(self, notifier, store):
        toast_id = use_toast(notifier).toast("Pinned", duration=0)
        assert store.get_notification(toast_id).options.duration == 0

    def test_dismiss(self, notifier, store):
        hook = use_toast(notifier)
        toast_id = hook.toast("Bye")

        hook.dismiss(toast_id)

        assert store.get_notification(toast_id).visible is False
