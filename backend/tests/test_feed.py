"""
Tests for the in-process booking feed behind the admin stream.
"""

from datetime import date, datetime

import pytest

from court_rental.schemas.booking import BookingResponse
from court_rental.services.feed_service import BookingFeed, build_notice


def make_booking(booking_id: int, name: str = "Ada Obi", total: int = 60000) -> BookingResponse:
    return BookingResponse(
        id=booking_id,
        court_id="indoor-arena",
        plan="Hourly",
        start_date=date(2025, 1, 2),
        end_date=date(2025, 1, 2),
        start_time=None,
        hours=2,
        base_amount=total,
        discount_amount=0,
        total_amount=total,
        promo_code_id=None,
        customer_name=name,
        customer_phone="+2348012345678",
        customer_email="ada@example.com",
        event_type="Tournament",
        notes=None,
        status="pending",
        created_at=datetime(2025, 1, 1, 12, 0),
    )


def test_build_notice():
    notice = build_notice(make_booking(1, total=1250000))
    assert notice.message == "New booking from Ada Obi"
    assert notice.meta == "Hourly • NGN 1,250,000"
    assert notice.booking.id == 1


@pytest.mark.asyncio
async def test_fan_out_to_every_subscriber():
    feed = BookingFeed()
    first, second = feed.subscribe(), feed.subscribe()

    assert feed.publish(make_booking(1)) == 2
    assert (await first.get()).booking.id == 1
    assert (await second.get()).booking.id == 1


@pytest.mark.asyncio
async def test_duplicate_publish_is_ignored():
    feed = BookingFeed()
    subscription = feed.subscribe()

    assert feed.publish(make_booking(1)) == 1
    assert feed.publish(make_booking(1)) == 0
    feed.publish(make_booking(2))
    subscription.close()

    ids = [notice.booking.id async for notice in subscription]
    assert ids == [1, 2]


@pytest.mark.asyncio
async def test_full_queue_drops_oldest():
    feed = BookingFeed(max_queue=2)
    subscription = feed.subscribe()
    for booking_id in (1, 2, 3):
        feed.publish(make_booking(booking_id))

    assert (await subscription.get()).booking.id == 2
    assert (await subscription.get()).booking.id == 3


@pytest.mark.asyncio
async def test_close_releases_subscriber():
    feed = BookingFeed()
    subscription = feed.subscribe()
    assert feed.subscriber_count == 1

    subscription.close()
    assert feed.subscriber_count == 0
    assert await subscription.get() is None
    assert feed.publish(make_booking(1)) == 0


@pytest.mark.asyncio
async def test_feed_close_ends_all_streams():
    feed = BookingFeed()
    subscriptions = [feed.subscribe() for _ in range(3)]
    feed.close()

    assert feed.subscriber_count == 0
    for subscription in subscriptions:
        assert [n async for n in subscription] == []


@pytest.mark.asyncio
async def test_seen_ids_are_bounded():
    feed = BookingFeed(seen_window=2)
    subscription = feed.subscribe()
    for booking_id in (1, 2, 3):
        assert feed.publish(make_booking(booking_id)) == 1

    # 1 fell out of the window, 3 is still remembered
    assert feed.publish(make_booking(1)) == 1
    assert feed.publish(make_booking(3)) == 0
    assert len(subscription._seen_ids) == 2
