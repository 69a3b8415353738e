"""Observability package bootstrap."""

from __future__ import annotations

from fastapi import FastAPI

from sportsapp.obs import logging as obs_logging
from sportsapp.obs import middleware

_initialised = False


def init(app: FastAPI) -> None:
	global _initialised
	if _initialised:
		return
	obs_logging.configure_logging()
	middleware.install(app)
	_initialised = True


__all__ = ["init"]
