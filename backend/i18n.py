# backend/i18n.py
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import requests
from sqlalchemy.orm import Session

from . import config
from .crud import get_translation

log = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = [
    "en", "as", "bn", "brx", "doi", "gu", "hi", "kn", "ks",
    "kok", "mai", "ml", "mni", "mr", "ne", "or", "pa",
    "sa", "sat", "sd", "ta", "te", "ur",
]

COUNTRY_LANGUAGES = {
    "IN": ["hi", "bn", "ta", "te", "mr", "gu"],
    "BD": ["bn"],
    "PK": ["ur"],
    "NP": ["ne"],
    "LK": ["ta"],
    "MY": ["ta"],
    "SG": ["ta"],
}

EMERGENCY_FALLBACK = {
    "loading": "Loading...",
    "error": "An error occurred",
    "welcome": "Welcome",
    "language": "Language",
    "common": {"loading": "Loading..."},
}


def is_language_supported(code: Optional[str]) -> bool:
    return bool(code) and code in SUPPORTED_LANGUAGES


class TranslationManager:
    """Per-language cache in front of the translations table."""

    def __init__(self, session_factory: Callable[[], Session], fallback_chain: Iterable[str] = ("en",)):
        self.session_factory = session_factory
        self.fallback_chain = list(fallback_chain)
        self.cache: Dict[str, dict] = {}

    def load(self, lang: str) -> dict:
        if lang in self.cache:
            return self.cache[lang]
        translations = self._fetch(lang)
        if translations is not EMERGENCY_FALLBACK:
            self.cache[lang] = translations
        return translations

    def _fetch(self, lang: str) -> dict:
        db = self.session_factory()
        try:
            data = get_translation(db, lang)
            if data is not None:
                return data
            for fallback in self.fallback_chain:
                if fallback == lang:
                    continue
                data = get_translation(db, fallback)
                if data is not None:
                    log.warning("Using %s as fallback for %s", fallback, lang)
                    return data
            log.error("No translations found for %s", lang)
        except Exception as e:
            log.error("Error loading translations for %s: %s", lang, e)
        finally:
            db.close()
        return EMERGENCY_FALLBACK

    def preload(self, langs: Iterable[str]) -> None:
        for lang in langs:
            self.load(lang)

    def clear_cache(self, lang: Optional[str] = None) -> None:
        if lang:
            self.cache.pop(lang, None)
        else:
            self.cache.clear()


def parse_accept_language(header: str) -> List[str]:
    """'hi-IN,hi;q=0.9,en;q=0.8' -> ['hi', 'hi', 'en'] ordered by weight"""
    entries = []
    for i, part in enumerate((header or "").split(",")):
        piece = part.strip()
        if not piece:
            continue
        tag, _, params = piece.partition(";")
        weight = 1.0
        if params.strip().startswith("q="):
            try:
                weight = float(params.strip()[2:])
            except ValueError:
                weight = 0.0
        entries.append((-weight, i, tag.strip().lower()))
    return [tag.split("-")[0] for _, _, tag in sorted(entries)]


class LanguageDetector:
    def __init__(self, geolocation_url: Optional[str] = None, timeout: int = 5):
        self.geolocation_url = (geolocation_url or config.GEOLOCATION_URL).rstrip("/")
        self.timeout = timeout

    def detect(self, saved: Optional[str] = None, accept_language: str = "", client_ip: Optional[str] = None) -> Tuple[str, str]:
        if is_language_supported(saved):
            return saved, "saved_preference"

        for code in parse_accept_language(accept_language):
            if is_language_supported(code):
                return code, "browser"

        location_lang = self.detect_by_location(client_ip)
        if location_lang:
            return location_lang, "location"

        return "en", "default"

    def detect_by_location(self, client_ip: Optional[str] = None) -> Optional[str]:
        # Without the caller's public IP the lookup would locate this server
        if not client_ip:
            return None
        url = f"{self.geolocation_url}/{client_ip}/json/"
        try:
            resp = requests.get(url, timeout=self.timeout)
            resp.raise_for_status()
            country = (resp.json() or {}).get("country_code")
        except (requests.RequestException, ValueError) as e:
            log.warning("Location detection failed: %s", e)
            return None
        candidates = COUNTRY_LANGUAGES.get(country or "")
        return candidates[0] if candidates else None
