# distaudit/src/distaudit/__init__.py
"""
This package verifies that a published package's installed artifact is
reproducible from its source: it rebuilds the source, fingerprints both
trees and reports whether they match.
"""

from .fingerprint import compare, enumerate_tree, fingerprint_tree
from .models import (
    AuditReport,
    ComparisonResult,
    PackageConfig,
    PackageReport,
    TreeFingerprint,
    Verdict,
)
from .packaging.auditor import PackageAuditor, audit_packages

__all__ = [
    "AuditReport",
    "ComparisonResult",
    "PackageAuditor",
    "PackageConfig",
    "PackageReport",
    "TreeFingerprint",
    "Verdict",
    "audit_packages",
    "compare",
    "enumerate_tree",
    "fingerprint_tree",
]
