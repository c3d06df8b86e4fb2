from fifa_tracker.data.factory import create_data_manager
from fifa_tracker.data.manager import DataManager
from fifa_tracker.data.models import AppData, BatchRequest, BatchResult, Order, SelectOptions, SelectResult
from fifa_tracker.data.retry import RetryExecutor

__all__ = [
    "AppData",
    "BatchRequest",
    "BatchResult",
    "DataManager",
    "Order",
    "RetryExecutor",
    "SelectOptions",
    "SelectResult",
    "create_data_manager",
]
