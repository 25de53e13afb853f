"""Errors raised by the archive."""


class LoadFailure(Exception):
    """Catalog source unreachable or empty after parsing."""


class NotReadyRejection(Exception):
    """Query attempted before a catalog was successfully loaded."""
    
    def __init__(self, message: str = "Catalog is not loaded; query rejected"):
        super().__init__(message)
