"""
Ownership inference module.

Analyzes GitHub commit history to determine:
- Who owns a directory or document
- Who to add as assignee when history is thin
"""

from owners_crawler.ownership.analyzer import AuthorScore, CommitAggregator
from owners_crawler.ownership.fallback import augment_with_fallback, load_fallback_owners
from owners_crawler.ownership.ranker import RankResolver
from owners_crawler.ownership.writer import OwnerWriter, render_yaml

__all__ = [
    "AuthorScore",
    "CommitAggregator",
    "RankResolver",
    "OwnerWriter",
    "augment_with_fallback",
    "load_fallback_owners",
    "render_yaml",
]
