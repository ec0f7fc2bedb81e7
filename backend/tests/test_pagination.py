from __future__ import annotations

import pytest

from hoaxify.dependencies.pagination import Pagination, normalize_pagination


@pytest.mark.parametrize(
    "page,size,expected",
    [
        (None, None, Pagination(page=0, size=10)),
        ("2", "5", Pagination(page=2, size=5)),
        ("-1", "5", Pagination(page=0, size=5)),
        ("1", "0", Pagination(page=1, size=10)),
        ("1", "11", Pagination(page=1, size=10)),
        ("1", "10", Pagination(page=1, size=10)),
        ("abc", "xyz", Pagination(page=0, size=10)),
        (" 3 ", "1", Pagination(page=3, size=1)),
        ("5abc", "1.5", Pagination(page=5, size=1)),
        ("+2", "7 items", Pagination(page=2, size=7)),
        ("x5", "-3", Pagination(page=0, size=10)),
    ],
)
def test_normalize_pagination(page, size, expected):
    assert normalize_pagination(page, size) == expected


def test_offset():
    assert Pagination(page=3, size=4).offset == 12


def test_bad_query_params_fall_back_to_defaults(client):
    res = client.get("/api/1.0/users", params={"page": "abc", "size": "1000"})
    assert res.status_code == 200
    body = res.json()
    assert body["page"] == 0
    assert body["size"] == 10
