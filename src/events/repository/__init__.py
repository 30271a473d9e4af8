from .cache import OwnerEventCache
from .repository import EventRepository
from .store import EventStore, SqlEventStore

__all__ = [
    "EventRepository",
    "EventStore",
    "OwnerEventCache",
    "SqlEventStore",
]
