"""Sentry initialisation for the pitch deck API."""

import re

import sentry_sdk
import structlog
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.httpx import HttpxIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

logger = structlog.get_logger()

_SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}
# Share tokens grant read access to a deck, so they are treated like credentials
_SHARE_TOKEN_PATH = re.compile(r"(/decks/shared/)[^/?#]+")
# Bodies of these routes carry passwords
_CREDENTIAL_ROUTES = ("/api/auth/login", "/api/auth/register")


def _scrub_sensitive_data(event: dict, hint: dict) -> dict:
    request = event.get("request") or {}

    headers = request.get("headers") or {}
    for header in list(headers):
        if header.lower() in _SENSITIVE_HEADERS:
            headers[header] = "[REDACTED]"

    url = request.get("url")
    if isinstance(url, str):
        request["url"] = _SHARE_TOKEN_PATH.sub(r"\1[REDACTED]", url)
        if request["url"].split("?", 1)[0].endswith(_CREDENTIAL_ROUTES):
            request.pop("data", None)

    transaction = event.get("transaction")
    if isinstance(transaction, str):
        event["transaction"] = _SHARE_TOKEN_PATH.sub(r"\1[REDACTED]", transaction)
    return event


def init_sentry(
    dsn: str | None,
    environment: str = "development",
    release: str | None = None,
) -> None:
    """Initialise Sentry before the FastAPI app is created.

    No-op when dsn is None or empty.
    """
    if not dsn:
        logger.warning("sentry_disabled", reason="SENTRY_DSN not set")
        return

    traces_sample_rate = 0.1 if environment == "production" else 1.0
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=traces_sample_rate,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            HttpxIntegration(),
        ],
        send_default_pii=False,
        before_send=_scrub_sensitive_data,
    )
    logger.info(
        "sentry_initialized",
        environment=environment,
        traces_sample_rate=traces_sample_rate,
    )
