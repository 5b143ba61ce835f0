"""
Application context: every long-lived resource the service needs.

One AppContext is built in the FastAPI lifespan, stored on
`app.state.context` and closed at shutdown. Request handlers reach it
through the `get_context` dependency instead of module-level globals, so
tests can assemble their own context (test database, fixed clock, mocked
mail transport) and install it on the app.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo

import httpx
import redis.asyncio as aioredis
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from court_rental.core.config import Settings
from court_rental.core.logging import get_logger
from court_rental.db.engine import build_engine, build_session_factory
from court_rental.services.cache_service import close_redis, connect_redis
from court_rental.services.feed_service import BookingFeed

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def business_clock(timezone_name: str) -> Clock:
    """Wall clock in the business timezone; 'today' for booking checks derives from it."""
    tz = ZoneInfo(timezone_name)
    return lambda: datetime.now(tz)


@dataclass
class AppContext:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    http: httpx.AsyncClient
    booking_feed: BookingFeed = field(default_factory=BookingFeed)
    redis: Optional[aioredis.Redis] = None
    clock: Optional[Clock] = None

    def now(self) -> datetime:
        if self.clock is None:
            self.clock = business_clock(self.settings.TIMEZONE)
        return self.clock()


async def create_context(settings: Settings) -> AppContext:
    engine = build_engine(settings)
    ctx = AppContext(
        settings=settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        http=httpx.AsyncClient(timeout=settings.MAIL_TIMEOUT_SECONDS),
        redis=await connect_redis(settings),
        clock=business_clock(settings.TIMEZONE),
    )
    logger.info(
        "context_ready",
        cache="enabled" if ctx.redis else "disabled",
        mail_provider=settings.MAIL_PROVIDER,
        timezone=settings.TIMEZONE,
    )
    return ctx


async def close_context(ctx: AppContext) -> None:
    ctx.booking_feed.close()
    await close_redis(ctx.redis)
    ctx.redis = None
    await ctx.http.aclose()
    await ctx.engine.dispose()


def get_context(request: Request) -> AppContext:
    return request.app.state.context
