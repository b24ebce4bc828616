"""Error types raised while loading and aggregating variant annotations."""

from __future__ import annotations


class BurdenUnitsError(Exception):
    """Base class for burden unit preparation failures."""


class MalformedInputError(BurdenUnitsError, ValueError):
    """Input cannot be parsed, or lacks a column the pipeline requires."""


class SchemaMismatchError(BurdenUnitsError, ValueError):
    """Several annotation files declare different column sets."""
