"""
Centralized configuration for the calendar export engine.

Settings are read from the environment on every call so tests can patch
os.environ. Entry points load .env / .env.local with python-dotenv.
"""

import os

DEFAULT_PRODID = "-//Better Together Community Engine//EN"


def is_dev_mode() -> bool:
    """Check if running in development mode (DEV_MODE env)."""
    return os.getenv("DEV_MODE", "").lower() in ("true", "1", "yes")


def get_prodid() -> str:
    """Product identifier written to every VCALENDAR."""
    return os.getenv("ICS_PRODID", DEFAULT_PRODID)


def get_uid_domain() -> str:
    """Domain part of generated event UIDs (event-<id>@<domain>)."""
    return os.getenv("ICS_UID_DOMAIN", "better-together")


def get_default_locale() -> str:
    """Locale used for reminder and description strings."""
    return os.getenv("ICS_LOCALE", "en")


def get_feed_max_age() -> int:
    """Seconds a subscription feed may be cached by the client."""
    return int(os.getenv("CALENDAR_FEED_MAX_AGE", "3600"))


def get_api_port() -> int:
    """Get API server port from env or default."""
    return int(os.getenv("API_PORT", "8000"))


def get_sentry_dsn() -> str | None:
    """Sentry DSN, or None to leave error reporting disabled."""
    return os.getenv("SENTRY_DSN") or None


# Format: (name, description, required_in_dev)
OPTIONAL_ENV_VARS = [
    ("SENTRY_DSN", "Sentry DSN for error reporting", False),
    ("ICS_UID_DOMAIN", "Domain used in event UIDs", False),
]


def check_required_env_vars() -> tuple[bool, list[str]]:
    """
    Check configuration environment variables.

    Nothing is strictly required; missing values fall back to defaults,
    but production deployments without them get a warning.

    Returns:
        (all_ok, warnings): Tuple of success flag and list of warning messages
    """
    warnings = []
    in_dev = is_dev_mode()

    for name, description, required_in_dev in OPTIONAL_ENV_VARS:
        if os.environ.get(name):
            continue
        if required_in_dev or not in_dev:
            warnings.append(f"  ⚠ {name}: Not set ({description})")

    return True, warnings
