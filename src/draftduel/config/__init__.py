"""Configuration helpers for draft roster rules."""

from .roster import DraftRules, get_rules, iter_rules

__all__ = [
    "DraftRules",
    "get_rules",
    "iter_rules",
]
