"""
Data types shared across the upload workflow.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from asset_uploader.storage.transfer import TransferHandle


@dataclass(frozen=True)
class AssetFile:
    """
    A file emitted by the bundler.

    Attributes:
        name: Output-relative logical name (e.g. "static/app.js")
        local_path: Absolute path of the file on disk
    """

    name: str
    local_path: str


@dataclass
class UploadTask:
    """
    One in-flight upload, owned by the upload coordinator.

    Attributes:
        file: The asset being uploaded
        remote_key: Object key the asset is written to
        params: Final parameters handed to the storage client
        handle: Transfer handle (completion signal and progress side channel)
    """

    file: AssetFile
    remote_key: str
    params: Dict[str, Any]
    handle: "TransferHandle"


@dataclass(frozen=True)
class InvalidationRequest:
    """A single CDN invalidation for all configured paths."""

    distribution_id: str
    paths: Tuple[str, ...]
    caller_reference: str


@dataclass
class BuildResult:
    """
    Outcome of one build as reported back to the bundler.

    Attributes:
        success: Whether every stage completed
        uploaded: Local paths of files that were uploaded
        invalidation_id: CDN invalidation id, if one was created
        error: The failure that aborted the build (None on success)
    """

    success: bool
    uploaded: List[str] = field(default_factory=list)
    invalidation_id: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None
