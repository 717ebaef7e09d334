"""
Directory Swapper
Removes old package files and moves a freshly extracted package into place
"""

import logging
import os
import shutil
import stat
from pathlib import Path

from installer_errors import FilesystemError

logger = logging.getLogger(__name__)


class DirectorySwapper:
    def __init__(self, project_root, installing_marker_dir):
        """Initialize directory swapper.

        Args:
            project_root: str/Path - Root directory of the host project
            installing_marker_dir: str/Path - Marker directory created while an install is in progress
        """
        self.project_root = Path(project_root)
        self.installing_marker_dir = self._resolve(installing_marker_dir)

    @classmethod
    def from_config(cls, config):
        return cls(config.project_root, config.installing_marker_dir)

    def _resolve(self, path):
        path = Path(path)
        if path.is_absolute():
            return path
        return self.project_root / path

    def _make_writable(self, path):
        """Clear read-only flags below path so rmtree can remove everything (Windows)."""
        for root, dirs, files in os.walk(path):
            for name in dirs + files:
                full = os.path.join(root, name)
                os.chmod(full, os.stat(full).st_mode | stat.S_IWRITE)

    def _remove_directory(self, path):
        try:
            shutil.rmtree(path)
        except PermissionError:
            self._make_writable(path)
            shutil.rmtree(path)

    def delete_path(self, path):
        """Delete a directory tree or a single file.

        Args:
            path: str/Path - Path to delete, relative to the project root or absolute.
                Blank or None is accepted (e.g. an asset lookup that found nothing).

        Returns:
            bool - True if something was removed, False if there was nothing to remove
        """
        if path is None or not str(path).strip():
            return False

        target = self._resolve(path)
        try:
            if target.is_dir() and not target.is_symlink():
                logger.info("Deleting directory: %s", path)
                self._remove_directory(target)
                return True
            if target.is_file() or target.is_symlink():
                logger.info("Deleting file: %s", path)
                try:
                    target.unlink()
                except PermissionError:
                    os.chmod(target, stat.S_IWRITE)
                    target.unlink()
                return True
        except OSError as e:
            raise FilesystemError(target, f"Failed to delete ({e})") from e

        return False

    def swap_in(self, staging_dir, final_dir):
        """Move the staging directory to the installed package location.

        The final directory must not exist; delete any previous install with
        delete_path first. The marker directory is left behind on purpose so an
        interrupted install can be spotted in the host's temp folder.

        Args:
            staging_dir: str/Path - Extracted package directory
            final_dir: str/Path - Installed package directory
        """
        staging_dir = Path(staging_dir)
        final_dir = self._resolve(final_dir)

        try:
            self.installing_marker_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(self.installing_marker_dir, f"Failed to create marker ({e})") from e

        if final_dir.exists():
            raise FilesystemError(final_dir, "Package directory already exists")
        if not staging_dir.is_dir():
            raise FilesystemError(staging_dir, "Staging directory is missing")

        logger.info("Moving %s to %s", staging_dir, final_dir)
        try:
            final_dir.parent.mkdir(parents=True, exist_ok=True)
            os.rename(staging_dir, final_dir)
        except OSError as e:
            raise FilesystemError(final_dir, f"Failed to move package into place ({e})") from e
