from __future__ import annotations


class ToolchainError(Exception):
    """Base error for source acquisition, archive staging and traineddata installs."""


class ResolutionError(ToolchainError):
    """A concrete version could not be determined."""


class NetworkError(ToolchainError):
    """A transport or HTTP failure on any request."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class FilenameInferenceError(ToolchainError):
    """No usable local filename could be determined for a download."""


class InvalidSpecError(ToolchainError):
    """An artifact spec renders to something that is not an absolute URL."""


class SourceNotFoundError(ToolchainError):
    """Requested upstream project does not exist in the registry."""


class ArchiveTypeError(ToolchainError):
    """Base error for archive classification problems."""


class UnknownArchiveTypeError(ArchiveTypeError):
    """The file name does not carry a recognized archive suffix."""


class UnsupportedArchiveTypeError(ArchiveTypeError):
    """The archive type is recognized but cannot be extracted."""


class RemoteMetadataError(ToolchainError):
    """Remote content-length is missing or not a non-negative integer."""


class ExtractionError(ToolchainError):
    """Reading or extracting an archive failed."""


class FilesystemError(ToolchainError):
    """Directory creation, rename or move failed."""


class MissingArchiveError(FilesystemError):
    """The archive to extract does not exist."""


class TraineddataError(ToolchainError):
    """Invalid traineddata set/category, or no tessdata directory."""
