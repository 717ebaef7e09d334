"""
Installer Config
Fixed download location, package paths and markers used by the VRCFury installer
"""

from pathlib import Path

DOWNLOAD_URL = "https://vrcfury.com/downloadRawZip"

MANIFEST_PATH = "Packages/manifest.json"
MAIN_PACKAGE_DIR = "Packages/com.vrcfury.vrcfury"
MAIN_PACKAGE_ARCHIVE = "Packages/com.vrcfury.vrcfury.tgz"
INSTALLING_MARKER_DIR = "Temp/vrcfInstalling"
TEMP_DIR = "Temp"

NAMESPACE_MARKER = "com.vrcfury."
MAIN_PACKAGE_MARKER = "com.vrcfury.vrcfury"
LOCAL_FILE_MARKER = "file:"
ARCHIVE_MARKER = "tgz"

# GUID of a script shipped by every old installer copy; found wherever the user moved it
LEGACY_INSTALLER_GUID = "00b990f230095454f82c345d433841ae"

LEGACY_PATHS = (
    "Assets/VRCFury",
    "Assets/VRCFury-installer",
    "Packages/com.vrcfury.legacyprefabs.tgz",
    "Packages/com.vrcfury.legacyprefabs",
    "Packages/com.vrcfury.updater.tgz",
    "Packages/com.vrcfury.updater",
    "Packages/com.vrcfury.installer",
)

RESTART_DELAY = 10.0

DIALOG_TITLE = "VRCFury Installer"
ERROR_MESSAGE = (
    "VRCFury encountered an error while installing."
    " If the issue repeats, try re-downloading from https://vrcfury.com/download or ask on the"
    " discord: https://vrcfury.com/discord\n\n"
    "{error}\nCheck the console for details."
)


class InstallerConfig:
    def __init__(self, project_root, **overrides):
        """Initialize installer configuration.

        Args:
            project_root: str/Path - Root directory of the host project
            **overrides: Any of the attribute names below, replacing the default value
        """
        self.project_root = Path(project_root)
        self.download_url = DOWNLOAD_URL
        self.manifest_path = MANIFEST_PATH
        self.main_package_dir = MAIN_PACKAGE_DIR
        self.main_package_archive = MAIN_PACKAGE_ARCHIVE
        self.installing_marker_dir = INSTALLING_MARKER_DIR
        self.temp_dir = TEMP_DIR
        self.namespace_marker = NAMESPACE_MARKER
        self.main_package_marker = MAIN_PACKAGE_MARKER
        self.local_file_marker = LOCAL_FILE_MARKER
        self.archive_marker = ARCHIVE_MARKER
        self.legacy_installer_guid = LEGACY_INSTALLER_GUID
        self.legacy_paths = LEGACY_PATHS
        self.restart_delay = RESTART_DELAY
        self.dialog_title = DIALOG_TITLE
        self.error_message = ERROR_MESSAGE

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise TypeError(f"Unknown installer setting: {key}")
            setattr(self, key, value)

    def resolve(self, relative_path):
        """Resolve a project-relative path against the project root."""
        return self.project_root / relative_path
