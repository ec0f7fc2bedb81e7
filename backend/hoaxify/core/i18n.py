# hoaxify/core/i18n.py
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from fastapi import Request

from hoaxify.core.config import settings

LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"
SUPPORTED_LOCALES = ("en", "es")


@lru_cache(maxsize=None)
def _catalog(locale: str) -> dict[str, str]:
    with open(LOCALES_DIR / f"{locale}.json", encoding="utf-8") as fh:
        return json.load(fh)


def _default_locale() -> str:
    return settings.DEFAULT_LOCALE if settings.DEFAULT_LOCALE in SUPPORTED_LOCALES else "en"


def parse_accept_language(header: str | None) -> str:
    """
    Pick the best supported locale from an Accept-Language header value,
    honoring q-weights. Falls back to DEFAULT_LOCALE.
    """
    if not header:
        return _default_locale()

    candidates: list[tuple[float, int, str]] = []
    for position, part in enumerate(header.split(",")):
        pieces = [p.strip() for p in part.split(";")]
        tag = pieces[0].lower()
        if not tag:
            continue
        weight = 1.0
        for param in pieces[1:]:
            if param.startswith("q="):
                try:
                    weight = float(param[2:])
                except ValueError:
                    weight = 0.0
        primary = tag.split("-")[0]
        if primary in SUPPORTED_LOCALES and weight > 0:
            candidates.append((-weight, position, primary))

    if not candidates:
        return _default_locale()
    return sorted(candidates)[0][2]


def request_locale(request: Request) -> str:
    return parse_accept_language(request.headers.get("accept-language"))


def translate(key: str, locale: str | None = None) -> str:
    locale = locale if locale in SUPPORTED_LOCALES else _default_locale()
    catalog = _catalog(locale)
    if key in catalog:
        return catalog[key]
    # Unknown keys fall back to English, then to the key itself.
    return _catalog("en").get(key, key)


def t(request: Request, key: str) -> str:
    return translate(key, request_locale(request))
