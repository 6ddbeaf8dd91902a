"""Optional Sentry error reporting."""
from __future__ import annotations

import logging

from ledgerdesk.core.config import settings
from ledgerdesk.core.exceptions import LedgerDeskException

logger = logging.getLogger(__name__)

_initialized = False


def drop_client_errors(event: dict, hint: dict) -> dict | None:
    """Sentry ``before_send`` hook.

    Domain errors answered with a 4xx (unknown customer, bad status, converted
    quote) are expected traffic and are not reported.
    """
    exc_info = hint.get("exc_info")
    if exc_info:
        exc = exc_info[1]
        if isinstance(exc, LedgerDeskException) and exc.status_code < 500:
            return None
    return event


def init_monitoring() -> None:
    global _initialized
    if _initialized:
        return
    _initialized = True
    if not settings.SENTRY_DSN:
        return

    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration

    try:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            integrations=[FastApiIntegration()],
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            environment=settings.ENV,
            release=f"ledgerdesk@{settings.APP_VERSION}",
            before_send=drop_client_errors,
        )
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to init Sentry: %s", exc)
        return
    logger.info("Sentry initialized (env=%s)", settings.ENV)
