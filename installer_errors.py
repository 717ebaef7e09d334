"""
Installer Errors
Exception types raised while installing the VRCFury package
"""


class InstallerError(Exception):
    """Base class for every failure that ends an install run."""


class NetworkError(InstallerError):
    """The package download failed."""

    def __init__(self, url, message):
        super().__init__(f"Failed to download {url}\n{message}")
        self.url = url


class ArchiveError(InstallerError):
    """The downloaded zip is malformed or could not be unpacked."""


class FilesystemError(InstallerError):
    """Deleting, moving or writing a manifest or package path failed."""

    def __init__(self, path, message):
        super().__init__(f"{message}: {path}")
        self.path = str(path)


class UnexpectedError(InstallerError):
    """Anything else, e.g. a host call raising something we don't know about."""
