"""Shared storage fakes for tests."""

from .stores import BrokenReadStore, FailingDeleteStore, QuotaExceededStore

__all__ = ["BrokenReadStore", "FailingDeleteStore", "QuotaExceededStore"]
