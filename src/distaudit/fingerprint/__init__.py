"""
The `fingerprint` sub-package holds the directory fingerprinting and
comparison engine.

This includes:
- Compiling ignore patterns into predicates.
- Enumerating a tree into a sorted list of relative paths.
- Building a TreeFingerprint from per-file and combined digests.
- Comparing a source fingerprint against an installed one.
"""

from .comparator import compare
from .enumerator import enumerate_tree
from .patterns import GlobRule, Pattern, WildcardRule, compile_patterns, matches
from .tree import fingerprint_tree

__all__ = [
    "GlobRule",
    "Pattern",
    "WildcardRule",
    "compare",
    "compile_patterns",
    "enumerate_tree",
    "fingerprint_tree",
    "matches",
]
