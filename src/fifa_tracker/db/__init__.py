from fifa_tracker.db.connection import ConnectionMonitor
from fifa_tracker.db.postgrest import PostgrestClient, classify_error
from fifa_tracker.db.protocol import (
    APIResponse,
    ConnectivityMonitor,
    ConnectivityProbe,
    DatabaseClient,
    QueryBuilder,
    TableClient,
)

__all__ = [
    "APIResponse",
    "ConnectionMonitor",
    "ConnectivityMonitor",
    "ConnectivityProbe",
    "DatabaseClient",
    "PostgrestClient",
    "QueryBuilder",
    "TableClient",
    "classify_error",
]
