"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNTER = Counter(
	"sportsapp_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"sportsapp_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

MODERATION_DECISIONS = Counter(
	"sportsapp_moderation_decisions_total",
	"Moderation verdicts by producing stage and outcome",
	["level", "outcome"],
)

MODERATION_AI_FAILURES = Counter(
	"sportsapp_moderation_ai_failures_total",
	"AI moderation stage failures collapsed to approval",
)

CLASSIFIER_REQUESTS = Counter(
	"sportsapp_classifier_requests_total",
	"Outbound classifier calls by result",
	["status"],
)

CLASSIFIER_LATENCY = Histogram(
	"sportsapp_classifier_latency_seconds",
	"Latency of outbound classifier calls",
	buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0),
)

RATE_LIMIT_DECISIONS = Counter(
	"sportsapp_rate_limit_decisions_total",
	"Rate limiter grants and denials per action type",
	["action", "outcome"],
)

WRITE_GATE_DENIALS = Counter(
	"sportsapp_write_gate_denials_total",
	"Write attempts refused by the write gate",
	["action", "code"],
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def inc_moderation_decision(level: str, approved: bool) -> None:
	MODERATION_DECISIONS.labels(level=level, outcome="approved" if approved else "blocked").inc()


def inc_moderation_ai_failure() -> None:
	MODERATION_AI_FAILURES.inc()


def observe_classifier(status: str, elapsed_seconds: float | None = None) -> None:
	CLASSIFIER_REQUESTS.labels(status=status).inc()
	if elapsed_seconds is not None:
		CLASSIFIER_LATENCY.observe(elapsed_seconds)


def inc_rate_limit(action: str, allowed: bool) -> None:
	RATE_LIMIT_DECISIONS.labels(action=action, outcome="allowed" if allowed else "denied").inc()


def inc_write_gate_denial(action: str, code: str) -> None:
	WRITE_GATE_DENIALS.labels(action=action, code=code).inc()
