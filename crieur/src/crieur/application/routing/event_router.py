"""
Event router: fans each inbound event out to its subscriptions.
"""

import asyncio
import inspect
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Union

from shared.reporter import SystemReporter
from shared.reporter.emojis import Emoji

from crieur.domain.entities.subscription import Handler, Subscription
from crieur.domain.exceptions import ChannelClosedError, SubscriptionError
from crieur.domain.value_objects import (
    WILDCARD,
    Event,
    EventType,
    normalize_event_type,
)

if TYPE_CHECKING:
    from crieur.domain.entities import Channel


class SubscriptionHandle:
    """
    Unsubscribe handle returned by subscribe().

    Calling it (or unsubscribe()) removes exactly its own handler; later
    calls are no-ops.
    """

    def __init__(self, router: "EventRouter", subscription: Subscription):
        self._router = router
        self.subscription = subscription

    @property
    def event_type(self) -> str:
        return self.subscription.event_type

    @property
    def active(self) -> bool:
        return self.subscription.active

    def unsubscribe(self) -> bool:
        """
        Remove the handler.

        Returns:
            True if this call removed it, False if already removed
        """
        return self._router.remove(self.subscription)

    def __call__(self) -> bool:
        return self.unsubscribe()

    def __repr__(self) -> str:
        return f"SubscriptionHandle({self.subscription!r})"


class EventRouter:
    """
    Per-channel subscriber registry and dispatcher.

    Dispatch is synchronous: handlers of one event run in registration
    order, then wildcard ('*') handlers. Coroutine handlers are scheduled
    as tasks so awaited I/O never delays other handlers or later events.
    Typed handlers receive the event payload; wildcard handlers receive
    the Event itself.
    """

    def __init__(self, reporter: Optional[SystemReporter] = None):
        self.reporter = reporter
        self.closed = False
        self.dispatched = 0
        self.handler_errors = 0

        self._subscriptions: Dict[str, List[Subscription]] = {}
        self._tasks: Set[asyncio.Task] = set()

    # ================================================================
    # REGISTRY
    # ================================================================

    def subscribe(
        self, event_type: Union[str, EventType], handler: Handler
    ) -> SubscriptionHandle:
        """
        Register a handler for an event type.

        Args:
            event_type: EventType, wire name or '*'
            handler: Sync or async callable

        Returns:
            SubscriptionHandle

        Raises:
            InvalidEventTypeError: If event_type is empty
            SubscriptionError: If handler is not callable or router closed
        """
        name = normalize_event_type(event_type)
        if not callable(handler):
            raise SubscriptionError(f"Handler for '{name}' is not callable")
        if self.closed:
            raise SubscriptionError(f"Cannot subscribe to '{name}': router closed")

        subscription = Subscription(name, handler)
        self._subscriptions.setdefault(name, []).append(subscription)

        if self.reporter:
            self.reporter.debug(
                f"{Emoji.MESSAGE.SUBSCRIBE} {subscription.handler_name} -> {name}",
                context="EventRouter",
            )
        return SubscriptionHandle(self, subscription)

    def remove(self, subscription: Subscription) -> bool:
        """Remove one subscription (idempotent)."""
        if not subscription.deactivate():
            return False

        handlers = self._subscriptions.get(subscription.event_type, [])
        self._subscriptions[subscription.event_type] = [
            s for s in handlers if s is not subscription
        ]
        if not self._subscriptions[subscription.event_type]:
            del self._subscriptions[subscription.event_type]

        if self.reporter:
            self.reporter.debug(
                f"{Emoji.MESSAGE.UNSUBSCRIBE} {subscription.handler_name} "
                f"-x {subscription.event_type}",
                context="EventRouter",
            )
        return True

    def subscriptions(self, event_type: Optional[str] = None) -> List[Subscription]:
        """Active subscriptions, optionally for one event type."""
        if event_type is not None:
            return list(self._subscriptions.get(normalize_event_type(event_type), []))
        return [s for subs in self._subscriptions.values() for s in subs]

    def subscriber_count(self, event_type: Optional[str] = None) -> int:
        return len(self.subscriptions(event_type))

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    # ================================================================
    # DISPATCH
    # ================================================================

    def dispatch(self, event: Event) -> int:
        """
        Deliver an event to its handlers.

        Args:
            event: Inbound event

        Returns:
            Number of handlers invoked
        """
        if self.closed:
            return 0

        targets = list(self._subscriptions.get(event.type, []))
        wildcards = list(self._subscriptions.get(WILDCARD, []))

        invoked = 0
        for subscription in targets:
            # A sibling handler may have unsubscribed it
            if subscription.active and not self.closed:
                self._invoke(subscription, event, event.payload)
                invoked += 1
        for subscription in wildcards:
            if subscription.active and not self.closed:
                self._invoke(subscription, event, event)
                invoked += 1

        self.dispatched += 1
        return invoked

    def _invoke(self, subscription: Subscription, event: Event, argument) -> None:
        try:
            result = subscription.handler(argument)
        except Exception as e:
            self._report_failure(subscription, event, e)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(
                lambda t, s=subscription, ev=event: self._on_task_done(t, s, ev)
            )

    def _on_task_done(
        self, task: asyncio.Task, subscription: Subscription, event: Event
    ) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._report_failure(subscription, event, error)

    def _report_failure(
        self, subscription: Subscription, event: Event, error: BaseException
    ) -> None:
        self.handler_errors += 1
        if self.reporter:
            self.reporter.error(
                f"{Emoji.ERROR.HANDLER} Handler {subscription.handler_name} failed "
                f"on '{event.type}' #{event.sequence}: {type(error).__name__}: {error}",
                context="EventRouter",
            )

    async def drain(self) -> None:
        """Wait for in-flight handler tasks."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> int:
        """
        Stop dispatch and cancel in-flight handler tasks.

        Subscriptions are deactivated so their handles become no-ops.

        Returns:
            Number of tasks cancelled
        """
        self.closed = True
        for subscription in self.subscriptions():
            subscription.deactivate()
        self._subscriptions.clear()

        cancelled = 0
        for task in list(self._tasks):
            if not task.done():
                task.cancel()
                cancelled += 1
        return cancelled


def subscribe(
    channel: "Channel", event_type: Union[str, EventType], handler: Handler
) -> SubscriptionHandle:
    """
    Register a handler on a channel.

    Raises:
        ChannelClosedError: If the channel has been closed
    """
    if channel.closed or channel.router is None or channel.router.closed:
        raise ChannelClosedError(str(channel.id))
    return channel.router.subscribe(event_type, handler)


def unsubscribe(handle: SubscriptionHandle) -> bool:
    """Remove the handler behind a handle (safe to call twice)."""
    return handle.unsubscribe()
