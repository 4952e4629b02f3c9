"""
Localized message catalog.

Messages live in one JSON file per locale under ./locales, keyed by message id.
The catalog is a plain lookup table: (locale, message id) -> text, with the
default locale as fallback for unknown locales and missing ids.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).parent / "locales"


class MessageCatalog:
    """
    Locale-keyed message lookup.

    Attributes:
        default_locale: Locale used when a request names none we support
        messages: Mapping of locale to {message id: text}
    """

    def __init__(self, messages: dict[str, dict[str, str]], default_locale: str = "en"):
        if default_locale not in messages:
            raise ValueError(f"Default locale '{default_locale}' has no catalog")

        self.messages = messages
        self.default_locale = default_locale

    @classmethod
    def load(
        cls,
        locales: list[str],
        default_locale: str = "en",
        directory: Path = LOCALES_DIR,
    ) -> "MessageCatalog":
        """
        Load the JSON catalogs for the given locales.

        Args:
            locales: Locale codes to load (e.g. ["en", "ru"])
            default_locale: Fallback locale, must be one of `locales`
            directory: Directory holding <locale>.json files

        Returns:
            A ready MessageCatalog

        Raises:
            FileNotFoundError: If a catalog file is missing
        """
        messages = {}
        for locale in locales:
            path = directory / f"{locale}.json"
            with path.open(encoding="utf-8") as f:
                messages[locale] = json.load(f)
            logger.debug(f"Loaded {len(messages[locale])} messages for locale '{locale}'")

        return cls(messages, default_locale=default_locale)

    @property
    def supported_locales(self) -> list[str]:
        return list(self.messages)

    def resolve_locale(self, accept_language: str | None) -> str:
        """
        Pick the locale for a request from its Accept-Language header.

        Tags are ranked by their q weight (default 1.0, header order breaks
        ties); the first whose primary subtag we support wins.

        Args:
            accept_language: Raw header value, e.g. "ru-RU,ru;q=0.9,en;q=0.8"

        Returns:
            A supported locale code, the default locale if none matches
        """
        if not accept_language:
            return self.default_locale

        candidates = []
        for position, part in enumerate(accept_language.split(",")):
            tag, _, params = part.strip().partition(";")
            tag = tag.strip().lower()
            if not tag or tag == "*":
                continue

            weight = 1.0
            params = params.strip()
            if params.startswith("q="):
                try:
                    weight = float(params[2:])
                except ValueError:
                    continue

            if weight > 0:
                candidates.append((-weight, position, tag.split("-")[0]))

        for _, _, language in sorted(candidates):
            if language in self.messages:
                return language

        return self.default_locale

    def translate(self, key: str, locale: str | None = None) -> str:
        """
        Resolve a message id to text.

        Args:
            key: Message id (e.g. "username_null")
            locale: Locale code, the default locale if None or unsupported

        Returns:
            The localized text, the default locale's text if the locale lacks
            the id, or the id itself if no catalog has it
        """
        catalog = self.messages.get(locale or self.default_locale, {})
        if key in catalog:
            return catalog[key]

        fallback = self.messages[self.default_locale].get(key)
        if fallback is None:
            logger.warning(f"Missing message id '{key}'")
            return key
        return fallback

    def translate_all(self, keys: dict[str, str], locale: str | None = None) -> dict[str, str]:
        """Translate every value of a field -> message id mapping, keeping order."""
        return {field: self.translate(key, locale) for field, key in keys.items()}
