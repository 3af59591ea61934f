"""
Sentry initialisation and event scrubbing.

Error reports must never carry customer contact details, credentials, or the
business data that travels through the backup endpoints (a restore request body
is a copy of the entire store).
"""

import re
from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.django import DjangoIntegration

SENSITIVE_KEYS = {
    "password",
    "secret",
    "token",
    "authorization",
    "cookie",
    "csrf",
    "session",
    "signature",
}

# URL prefixes whose request bodies are dropped entirely
BULK_DATA_PATHS = ("/api/backup",)

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_PATTERN = re.compile(r"\+?\d[\d\s-]{7,}\d")


def scrub_sensitive_data(data: Any) -> Any:
    """
    Recursively scrub sensitive data from dictionaries, lists, and strings.
    """
    if isinstance(data, dict):
        return {
            key: "[REDACTED]" if _is_sensitive_key(key) else scrub_sensitive_data(value)
            for key, value in data.items()
        }
    elif isinstance(data, list):
        return [scrub_sensitive_data(item) for item in data]
    elif isinstance(data, str):
        return _scrub_string(data)
    else:
        return data


def _is_sensitive_key(key: Any) -> bool:
    key_lower = str(key).lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def _scrub_string(text: str) -> str:
    text = EMAIL_PATTERN.sub("[EMAIL]", text)
    text = PHONE_PATTERN.sub("[PHONE]", text)
    return text


def _is_bulk_data_request(request: Dict[str, Any]) -> bool:
    url = request.get("url") or ""
    return any(prefix in url for prefix in BULK_DATA_PATHS)


def before_send(event: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Sentry before_send hook to scrub sensitive data from events.
    """
    if "request" in event:
        request = event["request"]

        if "headers" in request:
            request["headers"] = scrub_sensitive_data(request["headers"])

        if "cookies" in request:
            request["cookies"] = {k: "[REDACTED]" for k in request["cookies"]}

        if "query_string" in request:
            request["query_string"] = scrub_sensitive_data(request["query_string"])

        if "data" in request:
            if _is_bulk_data_request(request):
                request["data"] = "[BACKUP PAYLOAD REMOVED]"
            else:
                request["data"] = scrub_sensitive_data(request["data"])

    if "extra" in event:
        event["extra"] = scrub_sensitive_data(event["extra"])

    if "user" in event:
        user = event["user"]
        if "email" in user:
            user["email"] = "[EMAIL]"
        if "ip_address" in user:
            user["ip_address"] = "XXX.XXX.XXX.XXX"

    if "exception" in event and "values" in event["exception"]:
        for exception in event["exception"]["values"]:
            if "value" in exception:
                exception["value"] = _scrub_string(exception["value"])

    return event


def initialize_sentry(
    dsn: Optional[str],
    environment: str = "development",
    traces_sample_rate: float = 0.1,
    release: Optional[str] = None,
) -> None:
    """
    Initialize Sentry SDK with Django and Celery integrations.

    Args:
        dsn: Sentry DSN. If empty, Sentry is not initialized.
        environment: Environment name (development, staging, production)
        traces_sample_rate: Fraction of transactions to trace (0.0 to 1.0)
        release: Release version string
    """
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=traces_sample_rate,
        integrations=[
            DjangoIntegration(transaction_style="url"),
            CeleryIntegration(monitor_beat_tasks=True),
        ],
        before_send=before_send,
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        max_request_body_size="medium",
    )
