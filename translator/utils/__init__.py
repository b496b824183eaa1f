"""Shared utilities for the translator backend."""

from translator.utils.auth import (
    authenticate,
    issue_token,
    token_required,
    AUTH_COOKIE_NAME,
)

__all__ = [
    'authenticate',
    'issue_token',
    'token_required',
    'AUTH_COOKIE_NAME',
]
