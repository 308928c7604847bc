import logging
from typing import Any, Callable, Dict, List, Optional

from marketplace.domain.reducers import apply_change
from marketplace.domain.schemas import ChangeEvent

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[ChangeEvent], None]


class Subscription:
    def __init__(self, feed: "ChangeFeed", table: str, filters: Dict[str, Any], callback: ChangeCallback):
        self._feed = feed
        self.table = table
        self.filters = filters
        self.callback = callback
        self.active = True

    def matches(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        row = event.new or event.old or {}
        return all(row.get(field) == value for field, value in self.filters.items())

    def unsubscribe(self):
        if self.active:
            self._feed._remove(self)
            self.active = False


class ChangeFeed:
    """
    In-process publish/subscribe over table changes. Repositories publish
    after a successful commit; consumers subscribe per table with an
    equality filter such as {"user_id": "u1"}.
    """

    def __init__(self):
        self._subscriptions: List[Subscription] = []

    def subscribe(self, table: str, callback: ChangeCallback, filters: Optional[Dict[str, Any]] = None) -> Subscription:
        subscription = Subscription(self, table, dict(filters or {}), callback)
        self._subscriptions.append(subscription)
        logger.debug("Subscribed to %s changes (filters=%s)", table, subscription.filters)
        return subscription

    def publish(self, event: ChangeEvent):
        for subscription in list(self._subscriptions):
            if not subscription.matches(event):
                continue
            try:
                subscription.callback(event)
            except Exception as e:
                # A broken consumer must not stop delivery to the others
                logger.error(f"❌ Change callback failed for {event.table}: {e}", exc_info=True)

    def watch(self, table: str, initial: Optional[List[Dict[str, Any]]] = None,
              filters: Optional[Dict[str, Any]] = None) -> "LiveList":
        live = LiveList(initial or [])
        live.subscription = self.subscribe(table, live.apply, filters)
        return live

    def _remove(self, subscription: Subscription):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            logger.debug("Unsubscribed from %s changes", subscription.table)


class LiveList:
    """A list of rows kept current by folding change events into it."""

    def __init__(self, rows: List[Dict[str, Any]]):
        self.rows = list(rows)
        self.subscription: Optional[Subscription] = None

    def apply(self, event: ChangeEvent):
        self.rows = apply_change(self.rows, event)

    def close(self):
        if self.subscription is not None:
            self.subscription.unsubscribe()
