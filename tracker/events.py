import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = [
    'ACCOUNT_ADDED', 'ACCOUNT_DELETED', 'TRANSACTION_ADDED', 'TRANSACTION_DELETED',
    'Event', 'EventBus', 'log_handler',
]

logger = logging.getLogger(__name__)

ACCOUNT_ADDED = "ACCOUNT_ADDED"
ACCOUNT_DELETED = "ACCOUNT_DELETED"
TRANSACTION_ADDED = "TRANSACTION_ADDED"
TRANSACTION_DELETED = "TRANSACTION_DELETED"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event], None]


class EventBus:
    """Synchronous publish/subscribe used by the ledger store."""

    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def subscribe_all(self, handler: Handler) -> None:
        for name in (ACCOUNT_ADDED, ACCOUNT_DELETED, TRANSACTION_ADDED, TRANSACTION_DELETED):
            self.subscribe(name, handler)

    def publish(self, name: str, payload: dict) -> Event:
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        for handler in list(self._subscribers.get(name, [])):
            handler(event)
        return event


def log_handler(event: Event) -> None:
    logger.info("%s %s", event.name, event.payload)
