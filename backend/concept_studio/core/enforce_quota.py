"""Quota Enforcement — identity validation and free-generation limit checks.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Identity is the raw email string — trimmed of whitespace only, never lowercased
    - A count at or above the limit always raises QuotaExceededError

Design Decisions:
    - Minimal local@domain.tld pattern, not RFC 5322: the email is a quota key,
      not a deliverability guarantee
    - Raise (not return error dicts): callers are request handlers, and the global
      handler maps StudioError → HTTP status
"""

import re

from concept_studio.core.domain_types import Branch, IdentityEmail
from concept_studio.core.errors import (
    ErrorContext, QuotaExceededError, ValidationError,
)

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_identity_email(raw: object, branch: Branch) -> IdentityEmail:
    """Return the identity email or raise ValidationError."""
    ctx = ErrorContext(branch=branch.value)
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError(
            "A valid email address is required to generate designs.",
            "userEmail", ctx,
        )
    email = raw.strip()
    if not _EMAIL_PATTERN.match(email):
        raise ValidationError(
            f"'{email}' is not a valid email address.", "userEmail", ctx,
        )
    return IdentityEmail(email)


def check_quota(count: int, limit: int, branch: Branch) -> None:
    """Raise QuotaExceededError when the identity has no generations left."""
    if count >= limit:
        raise QuotaExceededError(limit, ErrorContext(branch=branch.value))


def remaining_generations(count: int, limit: int) -> int:
    """Free generations left for an identity (never negative)."""
    return max(0, limit - count)
