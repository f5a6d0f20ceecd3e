class ScannerError(Exception):
    """Raised when a scanner cannot produce a verdict."""


class ScannerUnavailableError(ScannerError):
    """Raised when the scanning service cannot be reached."""


class ScanSizeLimitExceededError(ScannerError):
    """Raised when a file exceeds what the scanning service accepts."""
