class OcrError(Exception):
    """Raised when optical character recognition fails."""
