"""Exception types for naminator.

MetadataError, RenameError and CleanupError describe a single item and
never stop a run; they travel inside outcome events. ConfigurationError
is raised before any concurrent work starts.
"""


class NaminatorError(Exception):
    """Base exception for all naminator errors."""


class ConfigurationError(NaminatorError):
    """Raised when the run cannot start (no input files, bad options, no ExifTool)."""


class MetadataError(NaminatorError):
    """Raised when required metadata cannot be extracted from a file."""


class RenameError(NaminatorError):
    """Raised when a photo cannot be moved to its destination."""


class CleanupError(NaminatorError):
    """Raised when an input directory cannot be inspected or removed."""
