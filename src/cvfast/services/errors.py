"""Exceptions raised by the short link services."""

from __future__ import annotations


class CVFastError(Exception):
    """Base class for service-layer errors."""


class NotFoundError(CVFastError):
    """A referenced entity does not exist (or is not visible to the caller)."""


class ShortLinkConflictError(CVFastError):
    """No unique short link hash could be stored."""
