"""Validation package."""

from findash.validation.validator import TransactionValidator

__all__ = ["TransactionValidator"]
