"""
Reconciler: applies the reconciliation policy to routed events.
"""

from collections import Counter
from typing import Any, List, Optional

from pydantic import ValidationError
from shared.reporter import SystemReporter
from shared.reporter.emojis import Emoji

from crieur.application.reconciliation.notices import NoticeSink, build_notice
from crieur.application.reconciliation.notification_store import NotificationStore
from crieur.application.reconciliation.policy import (
    ReconciliationPolicy,
    StoreAction,
)
from crieur.application.reconciliation.query_cache import QueryCache
from crieur.application.routing import SubscriptionHandle, subscribe
from crieur.domain.entities import Channel, Notification
from crieur.domain.events import (
    NotificationPayload,
    NotificationReadPayload,
    OrderEventPayload,
    parse_payload,
)
from crieur.domain.exceptions import ReconciliationError


class Reconciler:
    """
    Subscribes one handler per policy event type and reacts to events:
    local merges into the notification store, query invalidation and
    notices.

    Every reaction is idempotent, so duplicate deliveries are harmless.
    A failing reaction is logged and the subscription stays active.
    """

    def __init__(
        self,
        policy: ReconciliationPolicy,
        query_cache: QueryCache,
        notification_store: NotificationStore,
        notice_sink: Optional[NoticeSink] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        self.policy = policy
        self.query_cache = query_cache
        self.notification_store = notification_store
        self.notice_sink = notice_sink
        self.reporter = reporter

        self.handled: Counter = Counter()
        self.failures = 0
        self._handles: List[SubscriptionHandle] = []

    @property
    def attached(self) -> bool:
        return bool(self._handles)

    def attach(self, channel: Channel) -> List[SubscriptionHandle]:
        """
        Subscribe to every event type of the policy on a channel.

        Any previous attachment is detached first.
        """
        self.detach()
        for event_type in self.policy.event_types():
            handle = subscribe(
                channel,
                event_type,
                lambda payload, et=event_type: self.handle(et, payload),
            )
            self._handles.append(handle)

        if self.reporter:
            self.reporter.info(
                f"{Emoji.MESSAGE.SUBSCRIBE} Reconciling {len(self._handles)} event "
                f"types for profile '{self.policy.profile.value}'",
                context="Reconciler",
                verbose_level=2,
            )
        return list(self._handles)

    def detach(self) -> None:
        for handle in self._handles:
            handle.unsubscribe()
        self._handles = []

    def handle(self, event_type: str, raw_payload: Any) -> None:
        """Reconcile one event; failures are logged, never raised."""
        try:
            self.reconcile(event_type, raw_payload)
        except ReconciliationError as e:
            self.failures += 1
            if self.reporter:
                self.reporter.error(
                    f"{Emoji.ERROR.VALIDATION_ERROR} {e}",
                    context="Reconciler",
                )

    def reconcile(self, event_type: str, raw_payload: Any) -> None:
        """
        Apply the reaction for one event.

        Raises:
            ReconciliationError: If the payload does not match its schema
        """
        reaction = self.policy.reaction_for(event_type)
        if reaction is None:
            return

        try:
            payload = parse_payload(event_type, raw_payload)
        except ValidationError as e:
            raise ReconciliationError(
                f"Invalid '{event_type}' payload: {e.error_count()} error(s)",
                event_type,
            )

        self.handled[event_type] += 1

        if reaction.store == StoreAction.ADD and isinstance(payload, NotificationPayload):
            if not self.notification_store.add(Notification.from_payload(payload)):
                # Redelivered notification: no second notice
                return
        elif reaction.store == StoreAction.MARK_READ and isinstance(
            payload, NotificationReadPayload
        ):
            if payload.notification_id:
                self.notification_store.mark_as_read(payload.notification_id)
        elif reaction.store == StoreAction.MARK_ALL_READ:
            self.notification_store.mark_all_as_read()

        order_id = payload.order_id if isinstance(payload, OrderEventPayload) else None
        for prefix in self.policy.query_keys(event_type, order_id):
            self.query_cache.invalidate(prefix)

        notice = build_notice(reaction.notice, event_type, payload)
        if notice is not None and self.notice_sink is not None:
            self.notice_sink.show(notice)

        if self.reporter:
            self.reporter.debug(
                f"{Emoji.ORDER.STATUS} Reconciled '{event_type}'"
                + (f" (order={order_id})" if order_id else ""),
                context="Reconciler",
            )
