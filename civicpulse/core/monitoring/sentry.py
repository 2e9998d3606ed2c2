# Standard library imports
import logging
from typing import Any

# Third-party imports
import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

# Local application imports
from civicpulse.core.exceptions import CivicPulseError
from civicpulse.settings import settings


def sentry_enabled() -> bool:
    return settings.ENVIRONMENT == "production" and bool(settings.SENTRY_DSN)


def drop_expected_errors(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """Rejected votes, missing issues and other 4xx outcomes are not incidents."""
    exc_info = hint.get("exc_info")
    if exc_info and isinstance(exc_info[1], CivicPulseError) and exc_info[1].status_code < 500:
        return None
    return event


def _setup_sentry_logging() -> None:
    """
    Forward WARNING records to Sentry as breadcrumbs and ERROR records as events.
    No-op outside production or without a DSN.
    """
    if not sentry_enabled() or sentry_sdk.Hub.current.client:
        return

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        integrations=[LoggingIntegration(level=logging.WARNING, event_level=logging.ERROR)],
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        before_send=drop_expected_errors,
    )


_setup_sentry_logging()
