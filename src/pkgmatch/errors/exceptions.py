"""Custom exception classes for the matching service."""


class PkgMatchError(Exception):
    """Base exception for pkgmatch."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(PkgMatchError):
    """Schema or request validation failure."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class BadManifestError(PkgMatchError):
    """Manifest body is not a mapping or lacks a usable packages section."""

    def __init__(self, message: str = "Manifest doesn't have a usable packages section"):
        super().__init__("BAD_MANIFEST", message, status_code=400)


class RecordStoreError(PkgMatchError):
    """The record store could not answer a lookup."""

    def __init__(self, message: str, details=None):
        super().__init__("RECORD_STORE_ERROR", message, details, status_code=503)
