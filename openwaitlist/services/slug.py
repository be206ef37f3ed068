# File: openwaitlist/services/slug.py

import re
import secrets

SLUG_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SLUG_SUFFIX_LENGTH = 6

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def random_suffix(length: int = SLUG_SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(SLUG_ALPHABET) for _ in range(length))


def slugify(name: str) -> str:
    """
    Lowercase, drop everything outside [a-z0-9 whitespace -], turn whitespace
    runs into single hyphens and trim hyphens from both ends.

    "My  List!!" -> "my-list"
    """
    slug = _DISALLOWED.sub("", name.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def generate_slug(name: str) -> str:
    """
    Build "{slugified-name}-{6 random chars}".

    Every call draws a fresh suffix. A name with nothing usable left after
    slugify() yields just "-{suffix}".
    """
    return f"{slugify(name)}-{random_suffix()}"
