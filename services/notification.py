"""
Change Notification Bus

Payload-less, named signals that tell observers "re-read state". Publishing
is fire-and-forget: a failing subscriber is logged and never affects other
subscribers or the mutation that published the signal.
"""

import asyncio
import inspect
import logging
from typing import Callable

from enums.change_signal import ChangeSignal

logger = logging.getLogger(__name__)

Subscriber = Callable[[], object]


class ChangeNotifier:
    """
    Per-instance registry of change subscribers.

    Usage:
        notifier = ChangeNotifier()
        unsubscribe = notifier.subscribe(ChangeSignal.CART_CHANGED, refresh_badge)
        ...
        unsubscribe()
    """

    def __init__(self):
        self._subscribers: dict[ChangeSignal, list[Subscriber]] = {signal: [] for signal in ChangeSignal}
        # Strong references to scheduled coroutine subscribers until they finish
        self._pending_tasks: set[asyncio.Task] = set()

    def subscribe(self, signal: ChangeSignal, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for a signal.

        Returns:
            A callable that removes this subscription (safe to call repeatedly)
        """
        self._subscribers[signal].append(callback)
        return lambda: self.unsubscribe(signal, callback)

    def unsubscribe(self, signal: ChangeSignal, callback: Subscriber) -> None:
        if callback in self._subscribers[signal]:
            self._subscribers[signal].remove(callback)

    def subscriber_count(self, signal: ChangeSignal) -> int:
        return len(self._subscribers[signal])

    def publish(self, signal: ChangeSignal) -> None:
        """
        Invoke every subscriber of ``signal`` with no arguments.

        Coroutine subscribers are scheduled on the running event loop; with no
        running loop they are closed and skipped.
        """
        # Copy: a subscriber may unsubscribe itself while being notified
        for callback in list(self._subscribers[signal]):
            try:
                result = callback()
            except Exception as e:
                logger.warning(f"[ChangeNotifier] Subscriber {callback!r} failed on {signal.value}: {e}")
                continue

            if inspect.isawaitable(result):
                self._schedule(signal, result)

    def _schedule(self, signal: ChangeSignal, awaitable) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"[ChangeNotifier] No running event loop for async subscriber on {signal.value}")
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return

        task = loop.create_task(self._run_async_subscriber(signal, awaitable))
        self._pending_tasks.add(task)
        task.add_done_callback(self._pending_tasks.discard)

    @staticmethod
    async def _run_async_subscriber(signal: ChangeSignal, awaitable) -> None:
        try:
            await awaitable
        except Exception as e:
            logger.warning(f"[ChangeNotifier] Async subscriber failed on {signal.value}: {e}")
