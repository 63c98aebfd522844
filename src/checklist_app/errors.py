# src/checklist_app/errors.py

from __future__ import annotations


class ChecklistError(Exception):
    """Base class for application errors."""


class ValidationError(ChecklistError):
    """User input was rejected (shown to the user as an alert)."""


class StoreError(ChecklistError):
    """A document store operation failed."""
