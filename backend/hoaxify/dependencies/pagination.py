from __future__ import annotations

import re
from dataclasses import dataclass

from fastapi import Query

DEFAULT_PAGE = 0
DEFAULT_SIZE = 10
MAX_SIZE = 10

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class Pagination:
    page: int
    size: int

    @property
    def offset(self) -> int:
        return self.page * self.size


def _to_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    # Leading integer wins: "5abc" -> 5, "1.5" -> 1.
    match = _LEADING_INT_RE.match(raw)
    return int(match.group(1)) if match else None


def normalize_pagination(page: str | None, size: str | None) -> Pagination:
    page_num = _to_int(page)
    if page_num is None or page_num < 0:
        page_num = DEFAULT_PAGE

    size_num = _to_int(size)
    if size_num is None or size_num < 1 or size_num > MAX_SIZE:
        size_num = DEFAULT_SIZE

    return Pagination(page=page_num, size=size_num)


def get_pagination(
    page: str | None = Query(None),
    size: str | None = Query(None),
) -> Pagination:
    # Raw strings on purpose: non-numeric values normalize instead of failing with 422.
    return normalize_pagination(page, size)
