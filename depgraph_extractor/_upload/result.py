"""UploadResult dataclass for snapshot submission output."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class UploadResult:
    """
    Result of a snapshot upload.

    Attributes:
        success: Whether upload completed successfully
        destination_name: Name of the destination that handled the upload
        request_id: Request id reported by the destination, if any
        error_message: Error message if upload failed
        metadata: Destination response body
    """

    success: bool
    destination_name: str
    request_id: Optional[str] = None
    error_message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate result state."""
        if self.success and self.error_message:
            raise ValueError("Successful result should not have error_message")
        if not self.success and not self.error_message:
            raise ValueError("Failed result must have error_message")

    @classmethod
    def success_result(
        cls,
        destination_name: str,
        request_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "UploadResult":
        """Create a successful upload result."""
        return cls(
            success=True,
            destination_name=destination_name,
            request_id=request_id,
            metadata=metadata or {},
        )

    @classmethod
    def failure_result(
        cls,
        destination_name: str,
        error_message: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "UploadResult":
        """Create a failed upload result."""
        return cls(
            success=False,
            destination_name=destination_name,
            error_message=error_message,
            metadata=metadata or {},
        )
