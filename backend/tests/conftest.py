import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from fakeredis.aioredis import FakeRedis

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from sportsapp.main import app
from sportsapp.moderation.domain import container
from sportsapp.moderation.domain.counter_store import MemoryCounterStore


class FakeClock:
	"""Manually advanced monotonic clock."""

	def __init__(self, start: float = 1_000.0) -> None:
		self.now = start

	def __call__(self) -> float:
		return self.now

	def advance(self, seconds: float) -> None:
		self.now += seconds


@pytest_asyncio.fixture(autouse=True)
async def fake_redis():
	from sportsapp.infra.redis import redis_client, set_redis_client
	original = redis_client._client
	client = FakeRedis(decode_responses=True)
	set_redis_client(client)
	try:
		yield client
	finally:
		set_redis_client(original)
		await client.flushall()


@pytest.fixture
def clock() -> FakeClock:
	return FakeClock()


@pytest.fixture(autouse=True)
def fresh_container():
	"""Every test starts from an empty in-memory counter store."""
	container.configure(store=MemoryCounterStore())
	yield
	container.configure(store=MemoryCounterStore())


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
