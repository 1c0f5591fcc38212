class FolioError(Exception):
    """Base class for portfolio engine errors"""
    pass

class DuplicateIdentifierError(FolioError):
    """Raised when an entity would collide with an existing identifier or name"""

    def __init__(self, identifier: str, message: str | None = None):
        self.identifier = identifier
        super().__init__(message or f'"{identifier}" already exists')

class PositionNotFoundError(FolioError):
    """Raised when a position id is unknown"""
    pass

class TargetNotFoundError(FolioError):
    """Raised when a target allocation name is unknown"""
    pass

class ImportFormatError(FolioError):
    """Raised when imported JSON or CSV data is malformed"""
    pass
