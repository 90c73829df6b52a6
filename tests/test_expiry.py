import math
from datetime import timedelta

import pytest

from crumb import INFINITY, NEGATIVE_INFINITY, Cookie, parse
from crumb.utils.time import MAX_DATETIME, MIN_DATETIME, datetime_to_milliseconds


def test_ttl_without_expiry():
    assert Cookie("a", "b").ttl() == math.inf


@pytest.mark.parametrize("max_age", [0, -1, -3600])
def test_ttl_expired_max_age(max_age, now):
    cookie = Cookie("a", "b", max_age=max_age)

    assert cookie.ttl(now) == 0


@pytest.mark.parametrize("max_age", [1, 60, 3600])
def test_ttl_max_age(max_age, now):
    assert Cookie("a", "b", max_age=max_age).ttl(now) == max_age * 1000


def test_ttl_max_age_has_precedence_over_expires(now):
    cookie = Cookie("a", "b", max_age=60, expires=now - timedelta(days=1))

    assert cookie.ttl(now) == 60000


@pytest.mark.parametrize(
    "delta,expected_ttl",
    [
        [timedelta(seconds=10), 10000],
        [timedelta(days=1), 86400000],
        [timedelta(seconds=-10), -10000],
    ],
)
def test_ttl_expires(delta, expected_ttl, now):
    cookie = Cookie("a", "b", expires=now + delta)

    assert cookie.ttl(now) == expected_ttl


def test_ttl_absent_expires(now):
    cookie = Cookie("a", "b")
    cookie.expires = None

    assert cookie.ttl(now) == 0


def test_ttl_unbounded_max_age_falls_back_to_expires(now):
    assert Cookie("a", "b", max_age=INFINITY).ttl(now) == math.inf

    cookie = Cookie("a", "b", max_age=INFINITY, expires=now + timedelta(seconds=5))
    assert cookie.ttl(now) == 5000


def test_expiry_time_max_age_relative_to_now(now):
    cookie = Cookie("a", "b", max_age=60)

    assert cookie.expiry_time(now) == datetime_to_milliseconds(now) + 60000


def test_expiry_time_max_age_relative_to_last_accessed(now):
    cookie = Cookie("a", "b", max_age=60, last_accessed=now)

    assert cookie.expiry_time() == datetime_to_milliseconds(now) + 60000


def test_expiry_time_grows_with_max_age(now):
    values = [
        Cookie("a", "b", max_age=max_age, last_accessed=now).expiry_time()
        for max_age in [1, 2, 60, 3600, 86400]
    ]

    assert values == sorted(values)
    assert len(set(values)) == len(values)


@pytest.mark.parametrize("max_age", [0, -1, NEGATIVE_INFINITY])
def test_expiry_time_expired_max_age(max_age, now):
    assert Cookie("a", "b", max_age=max_age).expiry_time(now) == -math.inf


def test_expiry_time_unbounded(now):
    assert Cookie("a", "b").expiry_time(now) == math.inf
    assert Cookie("a", "b", max_age=INFINITY).expiry_time(now) == math.inf
    assert (
        Cookie("a", "b", max_age=60, last_accessed=INFINITY).expiry_time() == math.inf
    )


def test_expiry_time_expires(now):
    cookie = Cookie("a", "b", expires=now)

    assert cookie.expiry_time() == datetime_to_milliseconds(now)

    cookie.expires = None
    assert cookie.expiry_time() is None


def test_expiry_date(now):
    assert Cookie("a", "b", max_age=60).expiry_date(now) == now + timedelta(seconds=60)
    assert Cookie("a", "b", expires=now).expiry_date() == now
    assert Cookie("a", "b").expiry_date() == MAX_DATETIME
    assert Cookie("a", "b", max_age=0).expiry_date(now) == MIN_DATETIME

    cookie = Cookie("a", "b")
    cookie.expires = None
    assert cookie.expiry_date() is None


@pytest.mark.parametrize(
    "value,expected_result",
    [
        ["a=b", False],
        ["a=b; Max-Age=60", True],
        ["a=b; Max-Age=0", True],
        ["a=b; Expires=Wed, 21 Oct 2015 07:28:00 GMT", True],
        ["a=b; Expires=garbage", False],
    ],
)
def test_is_persistent(value, expected_result):
    cookie = parse(value)

    assert cookie is not None
    assert cookie.is_persistent() is expected_result
