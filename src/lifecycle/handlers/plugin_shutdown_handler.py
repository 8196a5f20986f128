from __future__ import annotations
from typing import TYPE_CHECKING

from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from plugin.asset_link import AssetLinkPlugin

log = get_logger().for_category(LogCategory.SHUTDOWN)


class PluginShutdownHandler(IShutdownHandler):
    """
    Shutdown handler for the Asset Link plugin.

    Unloads every component, which unsubscribes its handlers and cancels
    the tasks it owns (polls, in-flight transitions, pending sound stops).

    Priority: 100 (shutdown first)
    """

    def __init__(self, plugin: "AssetLinkPlugin"):
        self.plugin = plugin

    @property
    def shutdown_priority(self) -> int:
        return 100

    async def shutdown(self) -> None:
        count = len(self.plugin.components)
        log.info("Unloading plugin components...", components=count)
        await self.plugin.unload()
