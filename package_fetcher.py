"""
Package Fetcher
Downloads the package zip and unpacks it into a staging directory
"""

import logging
import posixpath
import shutil
import zipfile
import zlib
from pathlib import Path

import requests

from installer_errors import ArchiveError, NetworkError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class PackageFetcher:
    def __init__(self, temp_path_factory, session=None):
        """Initialize package fetcher.

        Args:
            temp_path_factory: callable - Returns a fresh, not yet existing, temp Path
            session: Optional requests.Session - HTTP session (a short-lived one is opened
                per download if omitted)
        """
        self.temp_path_factory = temp_path_factory
        self.session = session

    def download(self, url):
        """Download a zip archive into a new temp file.

        Args:
            url: str - Download URL

        Returns:
            Path - Path of the downloaded archive
        """
        archive_path = Path(f"{self.temp_path_factory()}.zip")
        logger.info("Downloading ...")
        if self.session is not None:
            self._download_to(self.session, url, archive_path)
        else:
            with requests.Session() as session:
                self._download_to(session, url, archive_path)

        logger.debug("Downloaded %s to %s", url, archive_path)
        return archive_path

    def _download_to(self, session, url, archive_path):
        try:
            with session.get(url, stream=True) as response:
                response.raise_for_status()
                archive_path.parent.mkdir(parents=True, exist_ok=True)
                # 'x' mode: never reuse a file left behind by an earlier run
                with open(archive_path, 'xb') as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except (requests.RequestException, OSError) as e:
            raise NetworkError(url, str(e)) from e

    def extract(self, archive_path):
        """Extract every file entry of a zip archive into a fresh staging directory.

        Entries with a blank file name are directory markers and are skipped;
        their directories are created on demand from the file entries.

        Args:
            archive_path: str/Path - Path to the zip archive

        Returns:
            Path - The staging directory holding the extracted files
        """
        staging_dir = Path(self.temp_path_factory())
        logger.info("Extracting ...")
        try:
            staging_dir.mkdir(parents=True)
            root = staging_dir.resolve()
            with zipfile.ZipFile(archive_path, 'r') as zip_ref:
                for entry in zip_ref.infolist():
                    if not posixpath.basename(entry.filename).strip():
                        continue
                    out_path = staging_dir / entry.filename
                    if not out_path.resolve().is_relative_to(root):
                        raise ArchiveError(f"Archive entry escapes the staging directory: {entry.filename}")
                    out_path.parent.mkdir(parents=True, exist_ok=True)
                    with zip_ref.open(entry) as src, open(out_path, 'wb') as dst:
                        shutil.copyfileobj(src, dst, CHUNK_SIZE)
        except (zipfile.BadZipFile, zlib.error, RuntimeError, EOFError, OSError) as e:
            raise ArchiveError(f"Failed to extract {archive_path}\n{e}") from e

        return staging_dir
