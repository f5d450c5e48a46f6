"""
Reconciliation layer: turns routed events into cache invalidations,
notification store merges and notices.
"""

from crieur.application.reconciliation.notices import (
    CollectingNoticeSink,
    Notice,
    NoticeLevel,
    NoticeSink,
    ReporterNoticeSink,
    build_notice,
)
from crieur.application.reconciliation.notification_store import NotificationStore
from crieur.application.reconciliation.policy import (
    DEFAULT_TABLE,
    NoticeKind,
    Profile,
    QueryKey,
    Reaction,
    ReconciliationPolicy,
    StoreAction,
)
from crieur.application.reconciliation.query_cache import QueryCache
from crieur.application.reconciliation.reconciler import Reconciler

__all__ = [
    "CollectingNoticeSink",
    "DEFAULT_TABLE",
    "Notice",
    "NoticeKind",
    "NoticeLevel",
    "NoticeSink",
    "NotificationStore",
    "Profile",
    "QueryCache",
    "QueryKey",
    "Reaction",
    "ReconciliationPolicy",
    "Reconciler",
    "ReporterNoticeSink",
    "StoreAction",
    "build_notice",
]
