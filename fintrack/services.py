"""Controller-side facade between the dashboard UI and the analytics.

``DashboardService`` owns what the pure engine must not: the signed-in user,
the transaction store, and the cached snapshot of its contents. Store
mutations go through the service, which announces them on the event bus;
the announcement drops the snapshot so the next view is recomputed.
"""

import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Iterable, Optional, Protocol, Tuple

from fintrack.domain import EXPENSE, MONTH, DashboardView, FilterSet, Transaction
from fintrack.events import TRANSACTION_ADDED, TRANSACTION_DELETED, Event, EventBus, event_bus
from fintrack.export import to_csv_bytes
from fintrack.functional import Either, validate_transaction
from fintrack.logging_setup import get_logger
from fintrack.memo import cached_aggregate
from fintrack.transforms import (
    add_transaction,
    load_transactions,
    remove_transaction,
    save_transactions,
    to_record,
)

logger = get_logger(__name__)


class TransactionSource(Protocol):
    def list(self) -> Tuple[Transaction, ...]: ...

    def add(self, t: Transaction) -> None: ...

    def delete(self, tx_id: str) -> None: ...


class InMemorySource:
    def __init__(self, trans: Iterable[Transaction] = ()):
        self._trans: Tuple[Transaction, ...] = tuple(trans)

    def list(self) -> Tuple[Transaction, ...]:
        return self._trans

    def add(self, t: Transaction) -> None:
        self._trans = add_transaction(self._trans, t)

    def delete(self, tx_id: str) -> None:
        self._trans = remove_transaction(self._trans, tx_id)


class JsonFileSource:
    """Transactions kept in a local JSON file shaped like the list endpoint."""

    def __init__(self, path: str):
        self.path = path

    def list(self) -> Tuple[Transaction, ...]:
        if not os.path.exists(self.path):
            return ()
        return load_transactions(self.path)

    def add(self, t: Transaction) -> None:
        save_transactions(self.path, add_transaction(self.list(), t))

    def delete(self, tx_id: str) -> None:
        save_transactions(self.path, remove_transaction(self.list(), tx_id))


@dataclass(frozen=True)
class UserContext:
    name: str
    token: str = ""

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else ""


class DashboardService:

    def __init__(
        self,
        source: TransactionSource,
        user: Optional[UserContext],
        bus: EventBus = event_bus,
        tz: tzinfo = timezone.utc,
    ):
        self.source = source
        self.user = user
        self.bus = bus
        self.tz = tz
        self._snapshot: Optional[Tuple[Transaction, ...]] = None
        self.bus.subscribe(TRANSACTION_ADDED, self._invalidate)
        self.bus.subscribe(TRANSACTION_DELETED, self._invalidate)

    def close(self) -> None:
        self.bus.unsubscribe(TRANSACTION_ADDED, self._invalidate)
        self.bus.unsubscribe(TRANSACTION_DELETED, self._invalidate)

    def _invalidate(self, event: Event, payload: dict) -> dict:
        self._snapshot = None
        return {"invalidated": True, "event": event.name}

    def require_user(self) -> UserContext:
        if self.user is None or not self.user.name:
            raise PermissionError("No signed-in user")
        return self.user

    def transactions(self) -> Tuple[Transaction, ...]:
        self.require_user()
        if self._snapshot is None:
            self._snapshot = tuple(self.source.list())
            logger.info("Loaded %d transaction(s)", len(self._snapshot))
        return self._snapshot

    def view(
        self,
        filter_set: FilterSet = FilterSet(),
        granularity: str = MONTH,
        breakdown_type: str = EXPENSE,
    ) -> DashboardView:
        return cached_aggregate(self.transactions(), filter_set, granularity, breakdown_type, self.tz)

    def add(self, t: Transaction) -> Either[dict, Transaction]:
        self.require_user()
        result = validate_transaction(t)
        if result.is_left():
            logger.warning("Rejected transaction %s: %s", t.id, result.get_error()["message"])
        return result.map(self._store)

    def _store(self, t: Transaction) -> Transaction:
        self.source.add(t)
        self.bus.publish(TRANSACTION_ADDED, to_record(t))
        return t

    def delete(self, tx_id: str) -> None:
        self.require_user()
        self.source.delete(tx_id)
        self.bus.publish(TRANSACTION_DELETED, {"id": tx_id})

    def export_csv(self, filter_set: FilterSet = FilterSet()) -> bytes:
        return to_csv_bytes(self.view(filter_set).filtered, self.tz)
