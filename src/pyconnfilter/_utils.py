"""Naming normalization, identifier quoting, and escaping utilities."""

from __future__ import annotations

import re

from pyconnfilter._constants import MAX_POSTGRESQL_IDENTIFIER_LENGTH
from pyconnfilter._errors import InvalidIdentifierError, InvalidFilterValueError

_LEADING_SEPARATORS = re.compile(r"^[_.\- ]+")
_SEPARATOR_WORD = re.compile(r"[_.\- ]+(\w|$)")
_DIGIT_WORD = re.compile(r"\d+(\w|$)")


def _is_ascii_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _preserve_camel_case(value: str) -> str:
    """Insert separators at existing case boundaries (``fooBar`` -> ``foo-Bar``)."""
    chars = list(value)
    last_lower = False
    last_upper = False
    last_last_upper = False
    i = 0
    while i < len(chars):
        ch = chars[i]
        if last_lower and _is_ascii_letter(ch) and ch.isupper():
            chars.insert(i, "-")
            last_lower = False
            last_last_upper = last_upper
            last_upper = True
            i += 1
        elif last_upper and last_last_upper and _is_ascii_letter(ch) and ch.islower():
            # Acronym boundary: FOOBar -> FOO-Bar. The current char is revisited.
            chars.insert(i - 1, "-")
            last_last_upper = last_upper
            last_upper = False
            last_lower = True
        else:
            last_lower = ch.lower() == ch and ch.upper() != ch
            last_last_upper = last_upper
            last_upper = ch.upper() == ch and ch.lower() != ch
        i += 1
    return "".join(chars)


def to_camel_case(value: str) -> str:
    """Convert a database identifier to the camelCase used by schema fields.

    This is the single normalization function shared by argument projection
    and argument lookup at resolve time.
    """
    value = value.strip()
    if not value:
        return ""
    if len(value) == 1:
        return value.lower()
    if value != value.lower():
        value = _preserve_camel_case(value)
    value = _LEADING_SEPARATORS.sub("", value).lower()
    value = _SEPARATOR_WORD.sub(lambda m: m.group(1).upper(), value)
    return _DIGIT_WORD.sub(lambda m: m.group(0).upper(), value)


def to_upper_camel_case(value: str) -> str:
    camel = to_camel_case(value)
    return camel[:1].upper() + camel[1:]


def validate_no_null_bytes(value: str, context: str = "string values") -> None:
    """Reject strings containing null bytes."""
    if "\x00" in value:
        raise InvalidFilterValueError(
            f"{context} cannot contain null bytes",
            f"null byte found in {context}: {value!r}",
        )


def quote_identifier(name: str) -> str:
    """Quote a SQL identifier, doubling embedded quotes."""
    if not name:
        raise InvalidIdentifierError(
            "identifier cannot be empty",
            "empty identifier provided",
        )
    if len(name.encode("utf-8")) > MAX_POSTGRESQL_IDENTIFIER_LENGTH:
        raise InvalidIdentifierError(
            "identifier too long",
            f"identifier '{name}' exceeds {MAX_POSTGRESQL_IDENTIFIER_LENGTH} bytes",
        )
    if "\x00" in name:
        raise InvalidIdentifierError(
            "identifier cannot contain null bytes",
            f"null byte found in identifier: {name!r}",
        )
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def escape_like_wildcards(value: str) -> str:
    """Escape LIKE wildcards in a bound parameter value."""
    result = value.replace("\\", "\\\\")
    result = result.replace("%", "\\%")
    return result.replace("_", "\\_")
