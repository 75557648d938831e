"""Reconciles a source fingerprint against an installed one."""

from ..models import ComparisonResult, TreeFingerprint, Verdict


def compare(source: TreeFingerprint, installed: TreeFingerprint) -> ComparisonResult:
    source_files = set(source.file_list)
    installed_files = set(installed.file_list)

    missing = sorted(source_files - installed_files)
    extra = sorted(installed_files - source_files)
    common = [p for p in source.file_list if p in installed_files]
    mismatches = [p for p in common if source.digests[p] != installed.digests[p]]

    # Extra installed files alone never make the verdict MISMATCHED.
    if source.combined == installed.combined:
        verdict = Verdict.IDENTICAL
    elif not mismatches and not missing:
        verdict = Verdict.EQUIVALENT_WITH_EXTRAS
    else:
        verdict = Verdict.MISMATCHED

    return ComparisonResult(
        missing_in_target=tuple(missing),
        extra_in_target=tuple(extra),
        content_mismatches=tuple(mismatches),
        common_files=tuple(common),
        verdict=verdict,
    )
