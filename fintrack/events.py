import weakref
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple, Optional

__all__ = ['event_bus', 'TRANSACTION_ADDED', 'TRANSACTION_DELETED', 'Event', 'EventBus']


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]
HandlerRef = Callable[[], Optional[Handler]]


def _ref(handler: Handler) -> HandlerRef:
    # bound methods are held weakly so a subscriber's owner can be collected
    if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
        return weakref.WeakMethod(handler)
    return lambda: handler


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[HandlerRef]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        if name not in self._subscribers:
            self._subscribers[name] = []
        self._subscribers[name].append(_ref(handler))

    def _live(self, name: str) -> List[Handler]:
        live = []
        refs = []
        for ref in self._subscribers.get(name, []):
            handler = ref()
            if handler is not None:
                live.append(handler)
                refs.append(ref)
        if name in self._subscribers:
            self._subscribers[name] = refs
        return live

    def subscriber_count(self, name: str) -> int:
        return len(self._live(name))

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._live(name)
        if not handlers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )

        results = []
        for handler in handlers:
            results.append(handler(event, payload))
        return results

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if name in self._subscribers:
            self._subscribers[name] = [
                ref for ref in self._subscribers[name] if ref() is not None and ref() != handler
            ]


TRANSACTION_ADDED = "TRANSACTION_ADDED"
TRANSACTION_DELETED = "TRANSACTION_DELETED"

event_bus = EventBus()
