"""Marketplace-specific exceptions that Protean's taxonomy does not cover."""

from protean.exceptions import ProteanException


class ConflictError(ProteanException):
    """A write collides with existing state, such as a duplicate unique key.

    Surfaces as 409 (Conflict).
    """
