"""
Manifest Store
Reads and rewrites the host's Packages/manifest.json line by line
"""

import logging
import os
import re
import tempfile
from pathlib import Path

from installer_config import ARCHIVE_MARKER, LOCAL_FILE_MARKER, MAIN_PACKAGE_MARKER, NAMESPACE_MARKER
from installer_errors import FilesystemError

logger = logging.getLogger(__name__)

LINE_BREAK = re.compile(r'\r\n|\r|\n')


class ManifestStore:
    """Substring based view of the manifest.

    Lines are never parsed as JSON: a line belongs to a package when the
    package id appears in it verbatim.
    """

    def __init__(self, manifest_path, namespace_marker=NAMESPACE_MARKER,
                 main_package_marker=MAIN_PACKAGE_MARKER,
                 local_file_marker=LOCAL_FILE_MARKER, archive_marker=ARCHIVE_MARKER):
        """Initialize manifest store.

        Args:
            manifest_path: str/Path - Path to the manifest file
            namespace_marker: str - Substring shared by every package of the family
            main_package_marker: str - Substring identifying the main package
            local_file_marker: str - Substring of a local directory reference
            archive_marker: str - Substring of a packaged archive reference
        """
        self.manifest_path = Path(manifest_path)
        self.namespace_marker = namespace_marker
        self.main_package_marker = main_package_marker
        self.local_file_marker = local_file_marker
        self.archive_marker = archive_marker

    @classmethod
    def from_config(cls, config):
        return cls(
            config.resolve(config.manifest_path),
            namespace_marker=config.namespace_marker,
            main_package_marker=config.main_package_marker,
            local_file_marker=config.local_file_marker,
            archive_marker=config.archive_marker,
        )

    def _read_lines(self):
        """Read the manifest lines.

        Returns:
            tuple - (lines, newline) or (None, None) if the manifest does not exist
        """
        if not self.manifest_path.is_file():
            return None, None
        try:
            with open(self.manifest_path, 'r', encoding='utf-8', errors='surrogateescape', newline='') as f:
                content = f.read()
        except OSError as e:
            raise FilesystemError(self.manifest_path, f"Failed to read manifest ({e})") from e

        newline = '\r\n' if '\r\n' in content else '\n'
        # Only CR/LF end a line; str.splitlines() would also split on U+2028 etc. inside JSON strings
        lines = LINE_BREAK.split(content)
        if lines and lines[-1] == '':
            lines.pop()
        return lines, newline

    def is_local_dev_line(self, line):
        return (self.namespace_marker in line
                and self.local_file_marker in line
                and self.archive_marker not in line)

    def line_matches(self, line, main_package_only):
        """Check whether a manifest line declares a package that should be removed.

        Args:
            line: str - Raw manifest line
            main_package_only: bool - Only match the main package, not the whole family

        Returns:
            bool - True if the line should be removed
        """
        if self.namespace_marker not in line:
            return False
        return not main_package_only or self.main_package_marker in line

    def has_local_dev_install(self):
        """Check if a package of the family is referenced as a local directory.

        Returns:
            bool - True if the manifest exists and has a local, non-archive entry
        """
        lines, _ = self._read_lines()
        if lines is None:
            return False
        return any(self.is_local_dev_line(line) for line in lines)

    def remove_entries(self, main_package_only):
        """Remove package lines from the manifest.

        Args:
            main_package_only: bool - Only remove the main package's lines

        Returns:
            bool - True if at least one line was removed and the manifest rewritten
        """
        lines, newline = self._read_lines()
        if lines is None:
            return False

        kept = []
        for line in lines:
            if self.line_matches(line, main_package_only):
                logger.info("Removing manifest line: %s", line)
            else:
                kept.append(line)

        if len(kept) == len(lines):
            return False

        self._write_lines(kept, newline)
        return True

    def _write_lines(self, lines, newline):
        """Write lines to a temp file beside the manifest, then move it over the original."""
        directory = self.manifest_path.parent
        temp_path = None
        original_removed = False
        try:
            fd, temp_path = tempfile.mkstemp(prefix='manifest-', suffix='.tmp', dir=directory)
            with os.fdopen(fd, 'w', encoding='utf-8', errors='surrogateescape', newline='') as f:
                for line in lines:
                    f.write(line + newline)
            self.manifest_path.unlink()
            original_removed = True
            Path(temp_path).rename(self.manifest_path)
        except OSError as e:
            # Once the original is gone the temp file is the only copy left
            if temp_path is not None and not original_removed:
                Path(temp_path).unlink(missing_ok=True)
            raise FilesystemError(self.manifest_path, f"Failed to rewrite manifest ({e})") from e
