"""
Event system implementation for the panel grid.

Publish-subscribe hub shared by the layout model, the drag controller and
the Qt host surface. The layout model publishes state changes; the host
publishes the pointer stream that an active drag session listens to.
"""
from typing import Any, Callable, Dict, List, Optional
import threading
from collections import defaultdict
from core.logging.logger import get_logger, is_verbose_logging
from core.events.event_types import Event, Subscription

logger = get_logger(__name__)


class EventSystem:
    """
    Centralized event hub.

    Subscribers are called synchronously in priority order (higher first).
    A handler that raises is logged and skipped; the remaining subscribers
    still receive the event.
    """

    def __init__(self):
        self._subscriptions: Dict[str, List[Subscription]] = defaultdict(list)
        self._subscription_map: Dict[str, Subscription] = {}
        self._lock = threading.RLock()

        logger.debug("EventSystem initialized")

    def subscribe(
        self,
        event_type: str,
        callback: Callable[[Event], None],
        priority: int = 50,
        filter_fn: Optional[Callable[[Event], bool]] = None,
    ) -> str:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: Type of event to subscribe to
            callback: Function to call when event is published
            priority: Priority (higher = called earlier), default 50
            filter_fn: Optional filter function

        Returns:
            str: Subscription ID for unsubscribing

        Raises:
            ValueError: If callback is not callable or event_type is blank
        """
        if not callable(callback):
            raise ValueError("Callback must be callable")

        if not isinstance(event_type, str) or not event_type.strip():
            raise ValueError("event_type must be a non-empty string")

        subscription = Subscription(callback, event_type, priority, filter_fn)

        with self._lock:
            self._subscriptions[event_type].append(subscription)
            self._subscription_map[subscription.id] = subscription
            self._subscriptions[event_type].sort()

        logger.debug("New subscription: %s for %s (priority=%d)", subscription.id, event_type, priority)
        return subscription.id

    def unsubscribe(self, subscription_id: str) -> bool:
        """
        Unsubscribe from events.

        Returns:
            True if the subscription existed
        """
        with self._lock:
            subscription = self._subscription_map.pop(subscription_id, None)
            if subscription is None:
                logger.warning("Unsubscribe called with unknown id: %s", subscription_id)
                return False

            # Deactivate first so an in-flight publish skips it
            subscription.active = False

            event_type = subscription.event_type
            remaining = [s for s in self._subscriptions.get(event_type, []) if s.id != subscription_id]
            if remaining:
                self._subscriptions[event_type] = remaining
            else:
                self._subscriptions.pop(event_type, None)

        logger.debug("Unsubscribed: %s", subscription_id)
        return True

    def publish(
        self,
        event_type: str,
        data: Any = None,
        source: Any = None
    ) -> Event:
        """
        Publish an event to all subscribers.

        Args:
            event_type: Type of event
            data: Optional event data
            source: Optional event source

        Returns:
            Event: The published event object
        """
        if not isinstance(event_type, str) or not event_type.strip():
            raise ValueError("event_type must be a non-empty string")

        event = Event(event_type, data, source)

        with self._lock:
            # Snapshot so handlers may (un)subscribe while we iterate
            matching_subs = list(self._subscriptions.get(event_type, []))

        if not matching_subs:
            return event

        if is_verbose_logging():
            logger.debug("Publishing event: %s, subscribers=%d", event_type, len(matching_subs))

        for subscription in matching_subs:
            if event.is_handled:
                break
            try:
                subscription(event)
            except Exception as e:
                logger.error("Error in event handler for %s: %s", event_type, e, exc_info=True)

        return event

    def clear(self) -> None:
        """Clear all subscriptions."""
        with self._lock:
            for subscription in self._subscription_map.values():
                subscription.active = False
            self._subscriptions.clear()
            self._subscription_map.clear()

        logger.debug("EventSystem cleared")

    def get_subscription_count(self) -> int:
        """Get total number of active subscriptions."""
        with self._lock:
            return len(self._subscription_map)

    def get_subscriptions_for_type(self, event_type: str) -> int:
        """Get number of subscriptions for a specific event type."""
        with self._lock:
            return len(self._subscriptions.get(event_type, []))
