# workhub/utils/helpers.py
import re
from collections.abc import Mapping, Iterable
from typing import Any

BEARER_PREFIX = "Bearer "
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def extract_bearer_token(header: str | None) -> str | None:
    """Returns the token after a literal "Bearer " prefix, or None."""
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    return header[len(BEARER_PREFIX):]


def has_role(user: Any, roles: Iterable[str]) -> bool:
    """True when the user (object or mapping) carries one of `roles`."""
    if not user:
        return False
    role = user.get("role") if isinstance(user, Mapping) else getattr(user, "role", None)
    return role is not None and role in list(roles)


def is_valid_email(email: Any) -> bool:
    # Shape check only (local@domain.tld), not RFC 5322.
    return isinstance(email, str) and EMAIL_RE.match(email) is not None
