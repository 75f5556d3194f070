from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import Any

from loguru import logger
from redis.asyncio import Redis

from ordergate.hours.models import ConfigurationError
from ordergate.settings.models import RestaurantSettings


class SettingsBroadcaster:
    """Propagates settings changes to running consumers through Redis.

    The latest snapshot is kept under ``cache_key`` so late subscribers can
    start from it; every publish also goes out on ``channel``.
    """

    def __init__(self, redis: Redis, channel: str, cache_key: str) -> None:
        self._redis = redis
        self._channel = channel
        self._cache_key = cache_key

    async def publish(self, settings: RestaurantSettings) -> int:
        payload = json.dumps(settings.to_dict(), ensure_ascii=False)
        await self._redis.set(self._cache_key, payload)
        receivers = await self._redis.publish(self._channel, payload)
        logger.info("Published settings update to {} subscriber(s)", receivers)
        return receivers

    async def latest(self) -> RestaurantSettings | None:
        raw = await self._redis.get(self._cache_key)
        if raw is None:
            return None
        return _decode(raw)

    async def listen(self) -> AsyncIterator[RestaurantSettings]:
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(self._channel)
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                try:
                    yield _decode(message["data"])
                except ConfigurationError as err:
                    logger.warning("Ignoring malformed settings update: {}", err)
        finally:
            await pubsub.unsubscribe(self._channel)
            await pubsub.close()


def _decode(raw: Any) -> RestaurantSettings:
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as err:
        raise ConfigurationError(f"Settings snapshot is not valid JSON: {err}") from err
    return RestaurantSettings.from_config(payload)
