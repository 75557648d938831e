class AuditError(Exception):
    pass


class ConfigError(AuditError):
    pass


class ManifestError(AuditError):
    pass


class BuildError(AuditError):
    pass


class FingerprintError(AuditError):
    pass
