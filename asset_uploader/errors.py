"""
Exception hierarchy for the asset uploader.

Every failure raised by the upload workflow derives from AssetUploaderError so
the plugin facade can turn any of them into a single failed build result.
Nothing here is retried: retry policy belongs to the storage and CDN backends.
"""

from typing import Iterable, Optional


class AssetUploaderError(Exception):
    """Base class for all asset uploader failures."""


class ConfigurationError(AssetUploaderError):
    """
    Plugin configuration is unusable.

    Raised before any network call is made, e.g. when a required upload
    parameter such as ``Bucket`` is missing.
    """

    def __init__(self, message: str, missing_keys: Optional[Iterable[str]] = None) -> None:
        self.missing_keys = list(missing_keys or [])
        super().__init__(message)


class InvalidRuleError(ConfigurationError, TypeError):
    """An include / exclude rule is not a regex, callable, string or list."""

    def __init__(self, rule: object) -> None:
        self.rule = rule
        super().__init__(
            f"Invalid include / exclude rule: {rule!r} "
            f"(type {type(rule).__name__})"
        )


class UploadFailedError(AssetUploaderError):
    """A single file transfer reported an error."""

    def __init__(self, file_name: str, key: str, error: BaseException) -> None:
        self.file_name = file_name
        self.key = key
        self.error = error
        super().__init__(
            f"Failed uploading file: {file_name} with Key {key} err: {error}"
        )


class InvalidationError(AssetUploaderError):
    """CDN invalidation failed after the uploads completed."""

    def __init__(
        self,
        message: str,
        distribution_id: Optional[str] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        self.distribution_id = distribution_id
        self.error = error
        super().__init__(message)


class EmptyInvalidationResponse(InvalidationError):
    """The CDN accepted the request but returned no invalidation body."""

    def __init__(self, distribution_id: str) -> None:
        super().__init__(
            f"Empty invalidation response for distribution {distribution_id}",
            distribution_id=distribution_id,
        )
