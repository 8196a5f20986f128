from .plugin_shutdown_handler import PluginShutdownHandler
from .api_server_shutdown_handler import APIServerShutdownHandler
from .all_tasks_cancellation_handler import AllTasksCancellationHandler

__all__ = [
    "PluginShutdownHandler",
    "APIServerShutdownHandler",
    "AllTasksCancellationHandler",
]
