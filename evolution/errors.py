"""
Error types for pixel-evolve.
Provides structured errors carrying a machine-readable code and details.
"""

from typing import Any, Dict, Optional


class PixelEvolveError(Exception):
    """Base exception for pixel-evolve errors."""

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a serializable error payload."""
        return {
            "error": {
                "code": self.code,
                "message": str(self),
                "details": self.details,
            }
        }


class InvalidConfigError(PixelEvolveError):
    """Raised when run parameters or genome shapes are invalid."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_CONFIG", details)


class ImageLoadError(PixelEvolveError):
    """Raised when the target image cannot be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Failed to load image {path}: {reason}",
            "IMAGE_LOAD_FAILED",
            {"path": path, "reason": reason},
        )


class SnapshotWriteError(PixelEvolveError):
    """Raised when a genome snapshot cannot be written."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Failed to write snapshot {path}: {reason}",
            "SNAPSHOT_WRITE_FAILED",
            {"path": path, "reason": reason},
        )


def require(condition: bool, message: str, **details: Any) -> None:
    """Raise InvalidConfigError unless condition holds."""
    if not condition:
        raise InvalidConfigError(message, details or None)
