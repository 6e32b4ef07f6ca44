"""
Contact record validation.

Each field is checked against a fixed pattern matched over the whole raw
string. Values are never trimmed or case-folded first.
"""

import re
from collections.abc import Mapping
from typing import Any

NAME_PATTERN = re.compile(r"[A-Za-z0-9]{1,20}")
# Whitespace as JavaScript regular expressions define \s.
JS_WHITESPACE = (
    "\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)
EMAIL_PATTERN = re.compile(
    rf"[^{JS_WHITESPACE}@]+@[^{JS_WHITESPACE}@]+\.[^{JS_WHITESPACE}@]+"
)
PHONE_PATTERN = re.compile(r"\d{10}", re.ASCII)
EIRCODE_PATTERN = re.compile(r"[0-9][A-Za-z0-9]{5}")

RECORD_FIELDS = ("first_name", "second_name", "email", "phone_number", "eircode")


def _matches(pattern: re.Pattern[str], value: Any) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def is_valid_name(value: Any) -> bool:
    return _matches(NAME_PATTERN, value)


def is_valid_email(value: Any) -> bool:
    return _matches(EMAIL_PATTERN, value)


def is_valid_phone(value: Any) -> bool:
    return _matches(PHONE_PATTERN, value)


def is_valid_eircode(value: Any) -> bool:
    return _matches(EIRCODE_PATTERN, value)


FIELD_VALIDATORS = {
    "first_name": is_valid_name,
    "second_name": is_valid_name,
    "email": is_valid_email,
    "phone_number": is_valid_phone,
    "eircode": is_valid_eircode,
}


def invalid_fields(record: Mapping[str, Any]) -> list[str]:
    """Return the names of the fields that fail validation, in field order.

    A missing field counts as failing.
    """
    return [
        field
        for field in RECORD_FIELDS
        if not FIELD_VALIDATORS[field](record.get(field))
    ]


def validate_record(record: Mapping[str, Any]) -> bool:
    return not invalid_fields(record)
