"""
Shutdown handler protocol for component-based graceful shutdown.

Each part of the plugin that needs cleanup implements IShutdownHandler to
participate in the graceful shutdown sequence.
"""

from typing import Protocol


class IShutdownHandler(Protocol):
    """
    Protocol for parts of the plugin that need graceful shutdown.

    The ShutdownCoordinator calls shutdown() on each handler in priority
    order (higher first).

    Example:
        class PluginShutdownHandler:
            @property
            def shutdown_priority(self) -> int:
                return 100  # Shutdown first

            async def shutdown(self) -> None:
                await self.plugin.unload()
    """

    @property
    def shutdown_priority(self) -> int:
        """
        Higher priority shuts down earlier.
        """
        ...

    async def shutdown(self) -> None:
        """
        Called during coordinated shutdown.
        """
        ...
