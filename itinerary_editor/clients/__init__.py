# itinerary_editor/clients/__init__.py

from itinerary_editor.clients.memory_store import MemoryRemoteStore, RecordedCall
from itinerary_editor.clients.protocols import (
    ConfirmerProtocol,
    NavigatorProtocol,
    NoticeLevel,
    NotifierProtocol,
    RemoteStoreProtocol,
)
from itinerary_editor.clients.remote_store import RemoteStoreClient, map_http_error

__all__ = [
    "ConfirmerProtocol",
    "MemoryRemoteStore",
    "NavigatorProtocol",
    "NoticeLevel",
    "NotifierProtocol",
    "RecordedCall",
    "RemoteStoreClient",
    "RemoteStoreProtocol",
    "map_http_error",
]
