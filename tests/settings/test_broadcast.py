import asyncio

import pytest

from ordergate.settings.broadcast import SettingsBroadcaster
from ordergate.settings.models import RestaurantSettings


class InMemoryPubSub:
    def __init__(self, redis):
        self._redis = redis
        self._queue: asyncio.Queue = asyncio.Queue()
        self.closed = False

    async def subscribe(self, channel):
        self._redis.subscribers.setdefault(channel, []).append(self._queue)
        await self._queue.put({"type": "subscribe", "data": 1})

    async def unsubscribe(self, channel):
        self._redis.subscribers[channel].remove(self._queue)

    async def listen(self):
        while True:
            yield await self._queue.get()

    async def close(self):
        self.closed = True


class InMemoryRedis:
    def __init__(self) -> None:
        self.values: dict[str, bytes] = {}
        self.subscribers: dict[str, list[asyncio.Queue]] = {}

    async def set(self, key, value):
        self.values[key] = value.encode() if isinstance(value, str) else value

    async def get(self, key):
        return self.values.get(key)

    async def publish(self, channel, message):
        queues = self.subscribers.get(channel, [])
        for queue in queues:
            await queue.put({"type": "message", "data": message.encode()})
        return len(queues)

    def pubsub(self):
        return InMemoryPubSub(self)


@pytest.fixture
def broadcaster():
    return SettingsBroadcaster(InMemoryRedis(), "ordergate:settings", "ordergate:snapshot")


@pytest.mark.asyncio
async def test_latest_is_empty_before_publish(broadcaster):
    assert await broadcaster.latest() is None


@pytest.mark.asyncio
async def test_publish_stores_snapshot(broadcaster, restaurant_config):
    settings = RestaurantSettings.from_config(restaurant_config)
    assert await broadcaster.publish(settings) == 0
    assert await broadcaster.latest() == settings


@pytest.mark.asyncio
async def test_listen_receives_updates(broadcaster, restaurant_config):
    settings = RestaurantSettings.from_config(restaurant_config)
    busy = RestaurantSettings.from_config({**restaurant_config, "isBusy": True})
    received = []

    async def consume():
        async for update in broadcaster.listen():
            received.append(update)
            if len(received) == 2:
                break

    task = asyncio.create_task(consume())
    await asyncio.sleep(0)
    await broadcaster.publish(settings)
    await broadcaster.publish(busy)
    await asyncio.wait_for(task, timeout=1)
    assert received == [settings, busy]
    assert received[1].is_busy


@pytest.mark.asyncio
async def test_listen_skips_malformed_payload(broadcaster, restaurant_config):
    redis = broadcaster._redis
    settings = RestaurantSettings.from_config(restaurant_config)

    async def first_update():
        async for update in broadcaster.listen():
            return update

    task = asyncio.create_task(first_update())
    await asyncio.sleep(0)
    await redis.publish("ordergate:settings", "{not json")
    await broadcaster.publish(settings)
    assert await asyncio.wait_for(task, timeout=1) == settings
