"""
The `packaging` sub-package contains the per-package audit built on top of
the fingerprinting engine.

This includes:
- Reading the version declared by a package manifest.
- Orchestrating the audit, typically by invoking the package's own build command.
- Collecting per-package reports into one AuditReport.
"""
