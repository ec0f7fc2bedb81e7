from __future__ import annotations

import json

import pytest

from hoaxify.core.i18n import LOCALES_DIR, parse_accept_language, translate


@pytest.mark.parametrize(
    "header,expected",
    [
        (None, "en"),
        ("", "en"),
        ("es", "es"),
        ("es-MX", "es"),
        ("fr", "en"),
        ("fr, es;q=0.5", "es"),
        ("en;q=0.4, es;q=0.8", "es"),
        ("es;q=0, en", "en"),
    ],
)
def test_parse_accept_language(header, expected):
    assert parse_accept_language(header) == expected


def test_translate_falls_back_to_key():
    assert translate("no_such_key", "es") == "no_such_key"


def test_catalogs_have_the_same_keys():
    en = json.loads((LOCALES_DIR / "en.json").read_text(encoding="utf-8"))
    es = json.loads((LOCALES_DIR / "es.json").read_text(encoding="utf-8"))
    assert set(en) == set(es)
