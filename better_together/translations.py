"""Translated strings for calendar exports, loaded from a YAML catalog."""

from pathlib import Path
from typing import Protocol

import yaml

from .config import get_default_locale


DEFAULT_LOCALE = "en"
MESSAGES_PATH = Path(__file__).parent / "locales" / "messages.yaml"

_catalogs: dict[Path, dict] = {}


class Translator(Protocol):
    def translate(self, key: str, **interpolation) -> str: ...


def load_catalog(path: Path = MESSAGES_PATH) -> dict:
    """
    Load a message catalog from YAML.

    Caches catalogs after first load, keyed by path.
    """
    path = Path(path)
    if path in _catalogs:
        return _catalogs[path]

    with open(path, encoding="utf-8") as f:
        _catalogs[path] = yaml.safe_load(f) or {}

    return _catalogs[path]


def lookup(catalog: dict, locale: str, key: str) -> str | None:
    """Find a dotted key (e.g. "events.ics.reminders.1_hour") under a locale."""
    node = catalog.get(locale)
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


class YamlTranslator:
    """
    Translator backed by locales/messages.yaml.

    Missing keys fall back to the default locale. Placeholders use
    str.format syntax: "Reminder: {event_name}".
    """

    def __init__(self, locale: str | None = None, path: Path | None = None):
        self.locale = locale or get_default_locale()
        self.path = path or MESSAGES_PATH

    def translate(self, key: str, **interpolation) -> str:
        """
        Render a translated message.

        Raises:
            KeyError: If the key exists in neither the locale nor the default
        """
        catalog = load_catalog(self.path)
        template = lookup(catalog, self.locale, key)
        if template is None:
            template = lookup(catalog, DEFAULT_LOCALE, key)
        if template is None:
            raise KeyError(f"Missing translation: {self.locale}.{key}")
        return template.format(**interpolation)


def default_translator() -> YamlTranslator:
    return YamlTranslator()
