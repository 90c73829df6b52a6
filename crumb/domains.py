"""
Domain canonicalization and public suffix lookup, used to validate the Domain
attribute of cookies (RFC 6265 S5.1.2 and S5.3 step 5).
"""
from functools import lru_cache
from ipaddress import IPv6Address
from typing import Optional

from publicsuffixlist import PublicSuffixList

from .exceptions import SpecialUseDomainError

# https://www.rfc-editor.org/rfc/rfc6761.html
SPECIAL_USE_DOMAINS = ("local", "example", "invalid", "localhost", "test")

# special use domains that are valid cookie domains on their own
SPECIAL_TREATMENT_DOMAINS = ("localhost", "invalid")


def _ipv6_address(value: str) -> Optional[IPv6Address]:
    if ":" not in value:
        return None
    try:
        return IPv6Address(value.strip("[]"))
    except ValueError:
        return None


def canonical_domain(domain: Optional[str]) -> Optional[str]:
    """
    Returns the canonical form of a domain: without a leading dot, lower case, and
    with internationalized labels converted to their ASCII (punycode) form.
    IPv6 addresses are returned in their compressed form, without brackets.

    Returns None if the domain is None or cannot be converted to ASCII.
    """
    if domain is None:
        return None

    value = domain.strip()
    if value.startswith("."):
        value = value[1:]

    address = _ipv6_address(value)
    if address is not None:
        return address.compressed

    if not value.isascii():
        try:
            return value.encode("idna").decode("ascii").lower()
        except UnicodeError:
            return None

    return value.lower()


@lru_cache(maxsize=1)
def get_public_suffix_list() -> PublicSuffixList:
    return PublicSuffixList()


def get_public_suffix(
    domain: str,
    *,
    allow_special_use_domain: bool = False,
    ignore_error: bool = False,
) -> Optional[str]:
    """
    Returns the public suffix of a domain plus one label (its registrable domain),
    for example "example.co.uk" for "www.example.co.uk". Returns None if the domain
    is itself a public suffix, like "co.uk".

    Domains under special use top-level domains (RFC 6761) raise
    SpecialUseDomainError, unless allow_special_use_domain or ignore_error are
    enabled.
    """
    domain_parts = domain.split(".")
    top_level_domain = domain_parts[-1]

    if top_level_domain in SPECIAL_USE_DOMAINS:
        if allow_special_use_domain:
            if len(domain_parts) > 1:
                return f"{domain_parts[-2]}.{top_level_domain}"
            if top_level_domain in SPECIAL_TREATMENT_DOMAINS:
                return top_level_domain
        if not ignore_error:
            raise SpecialUseDomainError(top_level_domain)

    return get_public_suffix_list().privatesuffix(domain)
