"""
In-process fan-out of new-booking notices to connected admins.

Each admin stream owns a Subscription with its own bounded queue. Delivery
is idempotent per subscriber: a booking id already seen by a subscription
is ignored, so duplicate publishes (retries, replays) never show the same
booking twice. Only the most recent `seen_window` ids are remembered, so a
long-lived stream uses bounded memory. When a slow subscriber's queue is
full the oldest notice is dropped to make room for the newest.
"""

import asyncio
import uuid
from collections import deque
from typing import Optional

from court_rental.core.logging import get_logger
from court_rental.core.metrics import feed_subscribers
from court_rental.schemas.admin import AdminNotice
from court_rental.schemas.booking import BookingResponse
from court_rental.utils.money import format_naira

logger = get_logger(__name__)

DEFAULT_QUEUE_SIZE = 100
# Booking ids remembered per subscriber for duplicate suppression
DEFAULT_SEEN_WINDOW = 1000


def build_notice(booking: BookingResponse) -> AdminNotice:
    return AdminNotice(
        id=uuid.uuid4().hex,
        message=f"New booking from {booking.customer_name}",
        meta=f"{booking.plan.value} • {format_naira(booking.total_amount)}",
        booking=booking,
    )


class Subscription:
    def __init__(self, feed: "BookingFeed", max_queue: int, seen_window: int = DEFAULT_SEEN_WINDOW):
        self._feed = feed
        self._queue: asyncio.Queue[Optional[AdminNotice]] = asyncio.Queue(maxsize=max_queue)
        self._seen_ids: set[int] = set()
        self._seen_order: deque[int] = deque()
        self._seen_window = seen_window
        self.closed = False

    def deliver(self, notice: AdminNotice) -> bool:
        if self.closed or notice.booking.id in self._seen_ids:
            return False
        self._remember(notice.booking.id)
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(notice)
        return True

    def _remember(self, booking_id: int) -> None:
        self._seen_ids.add(booking_id)
        self._seen_order.append(booking_id)
        if len(self._seen_order) > self._seen_window:
            self._seen_ids.discard(self._seen_order.popleft())

    async def get(self) -> Optional[AdminNotice]:
        """Next notice, or None once the subscription is closed."""
        if self.closed and self._queue.empty():
            return None
        return await self._queue.get()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        # Wake a reader blocked in get()
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(None)
        self._feed._discard(self)

    def __aiter__(self):
        return self

    async def __anext__(self) -> AdminNotice:
        notice = await self.get()
        if notice is None:
            raise StopAsyncIteration
        return notice


class BookingFeed:
    def __init__(self, max_queue: int = DEFAULT_QUEUE_SIZE, seen_window: int = DEFAULT_SEEN_WINDOW):
        self._max_queue = max_queue
        self._seen_window = seen_window
        self._subscribers: set[Subscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription:
        subscription = Subscription(self, self._max_queue, self._seen_window)
        self._subscribers.add(subscription)
        feed_subscribers.set(len(self._subscribers))
        return subscription

    def publish(self, booking: BookingResponse) -> int:
        """Fan a booking out to every subscriber; returns how many accepted it."""
        notice = build_notice(booking)
        delivered = sum(1 for sub in list(self._subscribers) if sub.deliver(notice))
        logger.debug("booking_feed_published", booking_id=booking.id, delivered=delivered)
        return delivered

    def close(self) -> None:
        for subscription in list(self._subscribers):
            subscription.close()

    def _discard(self, subscription: Subscription) -> None:
        self._subscribers.discard(subscription)
        feed_subscribers.set(len(self._subscribers))
