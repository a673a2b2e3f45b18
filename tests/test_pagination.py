"""Pagination helpers: permissive normalization + list metadata."""

import pytest

from fieldops.core.pagination import PaginationMeta, normalize, parse_int, summarize


def test_defaults_when_absent():
    p = normalize()
    assert (p.skip, p.take, p.page, p.limit) == (0, 10, 1, 10)


def test_offset_is_page_minus_one_times_limit():
    p = normalize(3, 20)
    assert p.skip == 40
    assert p.take == 20


@pytest.mark.parametrize(
    "page, limit, expected_page, expected_limit",
    [
        (0, 0, 1, 10),
        (-5, 5, 1, 5),
        (2, -1, 2, 1),
        (1, 500, 1, 100),
        (None, 100, 1, 100),
    ],
)
def test_out_of_range_values_are_clamped(page, limit, expected_page, expected_limit):
    p = normalize(page, limit)
    assert p.page == expected_page
    assert p.limit == expected_limit
    assert p.take == expected_limit
    assert p.skip == (expected_page - 1) * expected_limit


def test_summarize_rounds_total_pages_up():
    meta = summarize(95, 2, 10)
    assert meta == PaginationMeta(total=95, page=2, limit=10, total_pages=10)


def test_summarize_empty_list_has_zero_pages():
    assert summarize(0, 1, 10).total_pages == 0


def test_summarize_does_not_clamp_limit():
    with pytest.raises(ZeroDivisionError):
        summarize(5, 1, 0)


def test_meta_serializes_total_pages_in_camel_case():
    dumped = summarize(12, 1, 5).model_dump(by_alias=True)
    assert dumped == {"total": 12, "page": 1, "limit": 5, "totalPages": 3}


def test_negative_page_and_oversize_limit_together():
    p = normalize(page=-5, limit=500)
    assert (p.page, p.limit, p.skip, p.take) == (1, 100, 0, 100)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("3", 3),
        (" 12abc", 12),
        ("-5", -5),
        ("abc", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_int_reads_leading_digits(raw, expected):
    assert parse_int(raw) == expected


def test_unparsable_query_values_fall_back_to_defaults():
    p = normalize(parse_int("abc"), parse_int("xyz"))
    assert (p.page, p.limit) == (1, 10)
