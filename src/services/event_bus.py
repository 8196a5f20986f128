"""
Event Bus - Central event routing system

Implements pub-sub pattern:
- Publishers: publish(event)
- Subscribers: subscribe(event_type, handler, priority, filter_fn, owner)
- Middleware: add_middleware(middleware_fn)

Components subscribe with their object id as owner so that a single
unsubscribe_owner() call on unload detaches every handler they registered.
"""

import asyncio
from typing import Callable, List, Dict, Optional
from dataclasses import dataclass
from models.events import Event, EventType
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


@dataclass
class EventHandler:
    """Event handler registration"""
    handler: Callable[[Event], None]
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]
    owner: Optional[str] = None


class EventBus:
    """
    Central event bus for pub-sub event handling

    Features:
    - Priority-based handler execution (high priority first)
    - Per-handler filtering (fine-grained control)
    - Middleware pipeline (logging, blocking)
    - Async/sync handler support (auto-detected)
    - Fault tolerance (one handler crash doesn't stop others)
    - Owner-based unsubscription (component unload)

    Example:
        bus = EventBus()

        # Subscribe
        bus.subscribe(
            EventType.TRIGGER_RECEIVED,
            receiver.on_trigger,
            filter_fn=lambda e: e.action_id == "door",
            owner="door-01",
        )

        # Publish
        await bus.publish(TriggerReceivedEvent(message))

        # Detach everything door-01 registered
        bus.unsubscribe_owner("door-01")
    """

    def __init__(self):
        # Handlers organized by event type
        self._handlers: Dict[EventType, List[EventHandler]] = {}

        # Middleware pipeline (applied in registration order)
        self._middleware: List[Callable[[Event], Optional[Event]]] = []

        # Event history (circular buffer for debugging)
        self._event_history: List[Event] = []
        self._history_limit = 100

    def subscribe(
        self,
        event_type: EventType,
        handler: Callable[[Event], None],
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None,
        owner: Optional[str] = None,
    ) -> None:
        """
        Subscribe to event type

        Args:
            event_type: Which events to listen for
            handler: Function to call (can be async or sync)
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)
            owner: Optional owner key used by unsubscribe_owner()
        """
        if event_type not in self._handlers:
            self._handlers[event_type] = []

        handler_entry = EventHandler(handler, priority, filter_fn, owner)
        self._handlers[event_type].append(handler_entry)

        # Sort by priority (descending - highest first); sort is stable so
        # equal priorities keep subscription order
        self._handlers[event_type].sort(key=lambda h: h.priority, reverse=True)

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=getattr(handler, "__name__", repr(handler)),
            priority=priority,
            owner=owner or "-",
        )

    def unsubscribe(self, event_type: EventType, handler: Callable[[Event], None]) -> bool:
        """
        Remove a handler from an event type

        Returns:
            True if a registration was removed
        """
        handlers = self._handlers.get(event_type, [])
        remaining = [h for h in handlers if h.handler != handler]
        removed = len(remaining) != len(handlers)
        self._handlers[event_type] = remaining
        return removed

    def unsubscribe_owner(self, owner: str) -> int:
        """
        Remove every handler registered with the given owner (idempotent)

        Returns:
            Number of registrations removed
        """
        removed = 0
        for event_type, handlers in self._handlers.items():
            remaining = [h for h in handlers if h.owner != owner]
            removed += len(handlers) - len(remaining)
            self._handlers[event_type] = remaining

        if removed:
            log.debug("Owner handlers removed", owner=owner, count=removed)
        return removed

    def handler_count(self, event_type: EventType) -> int:
        return len(self._handlers.get(event_type, []))

    def add_middleware(self, middleware: Callable[[Event], Optional[Event]]) -> None:
        """
        Add middleware to event processing pipeline

        Middleware can:
        - Modify events (return modified event)
        - Block events (return None)
        - Log/validate events

        Middleware runs in registration order (FIFO).

        Args:
            middleware: Function that takes Event, returns Event or None
        """
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=middleware.__name__)

    async def publish(self, event: Event) -> None:
        """
        Publish event to all subscribers

        Flow:
        1. Apply middleware (can modify or block event)
        2. Save to event history
        3. Lookup handlers for event type
        4. Execute handlers by priority (high → low)
        5. Apply per-handler filters
        6. Handle async/sync handlers transparently
        7. Catch and log handler exceptions (fault tolerance)

        Args:
            event: Event to publish
        """
        # Apply middleware pipeline
        for middleware in self._middleware:
            processed_event = middleware(event)
            if processed_event is None:
                # Event blocked by middleware
                return
            event = processed_event

        # Save to history
        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

        # Snapshot: handlers may unsubscribe (component unload) while we iterate
        handlers = list(self._handlers.get(event.type, []))
        if not handlers:
            log.debug("No handlers for event", event_type=event.type.name)
            return

        # Execute handlers by priority
        for handler_entry in handlers:
            try:
                # Apply per-handler filter
                if handler_entry.filter_fn and not handler_entry.filter_fn(event):
                    continue

                # Handle async/sync transparently
                if asyncio.iscoroutinefunction(handler_entry.handler):
                    await handler_entry.handler(event)
                else:
                    handler_entry.handler(event)
            except Exception as e:
                log.error(
                    f"Event handler failed: {getattr(handler_entry.handler, '__name__', '?')} "
                    f"for {event.type.name}",
                    exception=e,
                )
                # Continue to next handler (fault tolerance)

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """
        Get recent events from history

        Args:
            limit: Number of recent events to return

        Returns:
            List of recent events (newest last)
        """
        return self._event_history[-limit:]
