"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from sportsapp import obs
from sportsapp.api import ops
from sportsapp.moderation import api as moderation_api
from sportsapp.moderation.domain import container
from sportsapp.settings import settings


@asynccontextmanager
async def lifespan(_: FastAPI):
	yield
	await container.shutdown()


app = FastAPI(title="SportsApp API", version=settings.git_commit, lifespan=lifespan)
obs.init(app)

app.include_router(ops.router)
app.include_router(moderation_api.router)
