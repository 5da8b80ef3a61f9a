"""
Semantic Roles - Classify a field hint once, up front.

The role drives field scoring. It is computed by a pure function and
passed along explicitly rather than re-derived at each call site.
"""

import re
from enum import Enum
from typing import Pattern, Union

# A hint is either literal text or a compiled pattern.
Hint = Union[str, Pattern[str]]


class SemanticRole(Enum):
    """Functional category of an input field."""
    USERNAME = "username"
    PASSWORD = "password"
    CODE = "code"          # One-time code / OTP
    EMAIL = "email"
    TEXT = "text"


PASSWORD_HINT = re.compile(r"password|pass|pwd", re.I)
CODE_HINT = re.compile(r"code|otp|verification", re.I)
USERNAME_HINT = re.compile(r"username|user|login|online\s*id", re.I)
EMAIL_HINT = re.compile(r"e-?mail", re.I)


def hint_text(hint: Hint) -> str:
    """Human-readable text of a hint (pattern source for regex hints)."""
    if isinstance(hint, str):
        return hint
    return hint.pattern


def describe_hint(hint: Hint) -> str:
    """Render a hint for log and error messages."""
    if isinstance(hint, str):
        return repr(hint)
    return f"/{hint.pattern}/"


def classify_hint(hint: Hint) -> SemanticRole:
    """
    Infer the semantic role of a field hint by keyword.

    Order matters: "password" wins over "user" (e.g. "user password"),
    and a code hint wins over a login hint ("login code").

    Example:
        >>> classify_hint("Password")
        <SemanticRole.PASSWORD: 'password'>
        >>> classify_hint(re.compile("enter code", re.I))
        <SemanticRole.CODE: 'code'>
    """
    text = hint_text(hint)
    if PASSWORD_HINT.search(text):
        return SemanticRole.PASSWORD
    if CODE_HINT.search(text):
        return SemanticRole.CODE
    if USERNAME_HINT.search(text):
        return SemanticRole.USERNAME
    if EMAIL_HINT.search(text):
        return SemanticRole.EMAIL
    return SemanticRole.TEXT


def is_username_like(hint: Hint) -> bool:
    text = hint_text(hint)
    return bool(USERNAME_HINT.search(text) or EMAIL_HINT.search(text))


def is_password_like(hint: Hint) -> bool:
    return bool(PASSWORD_HINT.search(hint_text(hint)))
