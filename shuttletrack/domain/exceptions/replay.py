class ReplaySourceError(Exception):
    """Raised when a recorded replay source cannot be decoded."""
