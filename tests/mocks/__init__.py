"""
Test doubles for the notifier.

ManualScheduler replaces the asyncio-backed scheduler so timer behavior can
be driven deterministically in virtual milliseconds.
"""

from tests.mocks.manual_scheduler import ManualScheduler

__all__ = ["ManualScheduler"]
