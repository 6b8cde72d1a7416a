"""Exclude rules: which rule, if any, makes a path ignored."""

from .base_rules import BaseExcludeResolver, DirTypeCache
from .git_rules import GitIgnoreExcludeResolver
from .rule_source import RuleSource
from .static_rules import StaticExcludeResolver

__all__ = [
    "BaseExcludeResolver",
    "DirTypeCache",
    "GitIgnoreExcludeResolver",
    "RuleSource",
    "StaticExcludeResolver",
]
