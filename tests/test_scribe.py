from datetime import datetime

import pytest

from crumb import Cookie, CookieSameSiteMode, scribe


@pytest.mark.parametrize(
    "cookie,expected_result",
    [
        (Cookie("Foo", "Power"), b"Foo=Power"),
        (
            Cookie(
                "Foo",
                "Power",
                expires=datetime(2018, 8, 17, 20, 55, 4),
                domain="something.org",
                path="/",
                http_only=True,
                secure=True,
                max_age=200,
                same_site=CookieSameSiteMode.STRICT,
            ),
            b"Foo=Power; Expires=Fri, 17 Aug 2018 20:55:04 GMT; Max-Age=200; "
            b"Domain=something.org; Path=/; Secure; HttpOnly; SameSite=Strict",
        ),
        (
            Cookie("Foo", "Power", same_site=CookieSameSiteMode.NONE, secure=True),
            b"Foo=Power; Secure",
        ),
    ],
)
def test_write_set_cookie(cookie, expected_result):
    assert scribe.write_set_cookie(cookie) == expected_result


@pytest.mark.parametrize(
    "cookies,expected_result",
    [
        ([], b""),
        ([Cookie("a", "1")], b"a=1"),
        ([Cookie("a", "1", path="/"), Cookie("", "xyz")], b"a=1; xyz"),
        (
            [Cookie("a", "1", secure=True, max_age=60), Cookie("b", "2")],
            b"a=1; b=2",
        ),
    ],
)
def test_write_cookie_header(cookies, expected_result):
    assert scribe.write_cookie_header(cookies) == expected_result
