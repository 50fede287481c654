"""
Common enums used across the application.

These are foundational types that don't belong to any specific layer:
how a tracked keyword is classified and what happened to a keyword mutation.
"""

from enum import Enum


class KeywordCategory(str, Enum):
    """Category tag stored alongside each tracked term, set by the caller at add-time."""
    ENTITY = "entity"    # People, channels, named things ("CarryMinati")
    TOPIC = "topic"      # Subject terms ("drama", "cricket")


class MutationStatus(str, Enum):
    """Outcome of a keyword add/remove."""
    ADDED = "added"
    EXISTS = "exists"
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
