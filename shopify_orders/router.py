import enum
import logging

logger = logging.getLogger(__name__)


class SyncStrategy(enum.Enum):
    """How an order event updates the local store."""

    FULL_SAVE = "full_save"  # refetch the order and run the persistence mapper
    STATUS_UPDATE = "status_update"  # narrow column update on the stored row
    IGNORE = "ignore"


class OrderEvent(enum.Enum):
    """Closed set of order webhook events, keyed by Shopify topic."""

    CREATED = ("orders/create", SyncStrategy.FULL_SAVE)
    UPDATED = ("orders/updated", SyncStrategy.FULL_SAVE)
    CANCELLED = ("orders/cancelled", SyncStrategy.STATUS_UPDATE)
    FULFILLED = ("orders/fulfilled", SyncStrategy.STATUS_UPDATE)
    UNRECOGNIZED = ("", SyncStrategy.IGNORE)

    def __init__(self, topic, strategy):
        self.topic = topic
        self.strategy = strategy

    @classmethod
    def from_topic(cls, topic):
        """Map a Shopify topic string to an event; unknown topics → UNRECOGNIZED."""
        for event in cls:
            if event.topic and event.topic == topic:
                return event
        return cls.UNRECOGNIZED


# Topics registered with Shopify, in registration order.
ORDER_TOPICS = tuple(
    event.topic for event in OrderEvent if event is not OrderEvent.UNRECOGNIZED
)

# Registry mapping order events to handler callables.
# Handlers are registered by handlers/orders.py during Django app ready().
_event_handlers = {}


def register_handler(event, handler):
    """Register a handler callable for an order event."""
    _event_handlers[event] = handler
    logger.debug("Registered handler for event: %s", event.name)


def get_handler(event):
    """Return the handler callable for the given event, or None."""
    return _event_handlers.get(event)
