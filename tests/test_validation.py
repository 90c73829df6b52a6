import logging
from datetime import datetime

import pytest

from crumb import INFINITY, NEGATIVE_INFINITY, Cookie


def test_validate_simple_cookie():
    assert Cookie(key="k", value="v").validate() is True


@pytest.mark.parametrize(
    "value,expected_result",
    [
        ["v", True],
        ["abc123-_.!#$%&'*+/:<=>?@[]^`{|}~", True],
        ["v;bad", False],
        ["", False],
        ["with space", False],
        ['"quoted"', False],
        ["a,b", False],
        ["back\\slash", False],
        ["ünicode", False],
    ],
)
def test_validate_value(value, expected_result):
    assert Cookie("k", value).validate() is expected_result


@pytest.mark.parametrize(
    "expires,expected_result",
    [
        [INFINITY, True],
        [datetime(2015, 10, 21, 7, 28), True],
        ["Wed, 21 Oct 2015 07:28:00 GMT", True],
        ["garbage", False],
        [None, False],
    ],
)
def test_validate_expires(expires, expected_result):
    cookie = Cookie("k", "v")
    cookie.expires = expires

    assert cookie.validate() is expected_result


@pytest.mark.parametrize(
    "max_age,expected_result",
    [
        [None, True],
        [10, True],
        [INFINITY, True],
        [0, False],
        [-1, False],
        [NEGATIVE_INFINITY, False],
    ],
)
def test_validate_max_age(max_age, expected_result):
    assert Cookie("k", "v", max_age=max_age).validate() is expected_result


@pytest.mark.parametrize(
    "path,expected_result",
    [
        [None, True],
        ["/", True],
        ["/foo/bar baz", True],
        ["/foo;bar", False],
        ["/tab\t", False],
        ["", False],
    ],
)
def test_validate_path(path, expected_result):
    cookie = Cookie("k", "v")
    cookie.path = path

    assert cookie.validate() is expected_result


@pytest.mark.parametrize(
    "domain,expected_result",
    [
        [None, True],
        ["example.com", True],
        [".example.com", True],
        ["www.example.co.uk", True],
        ["bücher.de", True],
        ["example.com.", False],
        ["com", False],
        ["co.uk", False],
        ["localhost", False],
        ["foo.test", False],
    ],
)
def test_validate_domain(domain, expected_result):
    assert Cookie("k", "v", domain=domain).validate() is expected_result


def test_validate_logs_the_reason(caplog):
    caplog.set_level(logging.DEBUG, logger="crumb.cookies")

    assert Cookie("k", "v", domain="co.uk").validate() is False

    assert any("public suffix" in record.getMessage() for record in caplog.records)
