class CookieError(Exception):
    def __init__(self, message: str):
        super().__init__(message)


class InvalidCookie(CookieError):
    def __init__(self, value: str):
        super().__init__(f"Invalid Set-Cookie value: {value!r}")
        self.value = value


class InvalidCookieAttribute(CookieError, ValueError):
    def __init__(self, name: str, value):
        super().__init__(f"Invalid value for the cookie attribute {name}: {value!r}")
        self.name = name
        self.value = value


class SpecialUseDomainError(CookieError):
    def __init__(self, top_level_domain: str):
        super().__init__(
            f'Cookie has domain set to the public suffix "{top_level_domain}" '
            "which is a special use domain. "
            "See: https://www.rfc-editor.org/rfc/rfc6761.html"
        )
        self.top_level_domain = top_level_domain
