"""
Install Orchestrator
Runs one VRCFury install: dev-mode check, cleanup, download, extract, swap and re-resolve
"""

import logging
import threading
import time

from directory_swapper import DirectorySwapper
from installer_config import InstallerConfig
from installer_errors import InstallerError, UnexpectedError
from manifest_store import ManifestStore
from package_fetcher import PackageFetcher

logger = logging.getLogger(__name__)

IDLE = 'idle'
CHECKING_DEV_MODE = 'checking_dev_mode'
CLEANING_OLD = 'cleaning_old'
RESTART_PAUSE = 'restart_pause'
DOWNLOADING = 'downloading'
EXTRACTING = 'extracting'
SWAPPING_IN = 'swapping_in'
CLEANING_LEGACY = 'cleaning_legacy'
RE_RESOLVING = 're_resolving'
DONE = 'done'
FAILED = 'failed'

SKIPPED = 'skipped'
SUCCEEDED = 'succeeded'


def install_result(status, message, error=None):
    """Build an install result dict.

    Args:
        status: str - 'skipped', 'succeeded' or 'failed'
        message: str - Human readable outcome
        error: Optional InstallerError - Failure cause

    Returns:
        dict - Result with keys:
        - status: str - outcome
        - message: str - outcome description
        - error: str or None - error text when failed
        - error_type: str or None - error class name when failed
    """
    return {
        'status': status,
        'message': message,
        'error': str(error) if error is not None else None,
        'error_type': type(error).__name__ if error is not None else None,
    }


class InstallOrchestrator:
    def __init__(self, host, config=None, manifest=None, fetcher=None, swapper=None, sleep=time.sleep):
        """Initialize install orchestrator.

        Args:
            host: HostBridge - Host services (main thread, resolution, dialogs, temp paths)
            config: Optional InstallerConfig - Defaults to the stock config for host.project_root
            manifest: Optional ManifestStore
            fetcher: Optional PackageFetcher
            swapper: Optional DirectorySwapper
            sleep: callable - Used for the restart pause
        """
        self.host = host
        self.config = config or InstallerConfig(host.project_root)
        self.manifest = manifest or ManifestStore.from_config(self.config)
        self.fetcher = fetcher or PackageFetcher(self._unique_temp_path)
        self.swapper = swapper or DirectorySwapper.from_config(self.config)
        self.sleep = sleep
        self.state = IDLE
        self.result = None
        self.thread = None

    def _enter(self, state):
        logger.debug("State %s -> %s", self.state, state)
        self.state = state

    def _unique_temp_path(self):
        return self.host.run_in_main_thread(self.host.unique_temp_path)

    def start(self):
        """Run the install on a background thread.

        Returns:
            threading.Thread - The started thread
        """
        self.thread = threading.Thread(target=self.run, name='vrcfury-installer', daemon=True)
        self.thread.start()
        return self.thread

    def run(self):
        """Run the whole install, reporting any failure to the user.

        Never raises. Nothing is retried or rolled back; the next host load
        starts over from whatever state was left behind.

        Returns:
            dict - Install result (see install_result)
        """
        try:
            self.result = self._install_unsafe()
        except InstallerError as e:
            self.result = self._fail(e)
        except Exception as e:
            error = UnexpectedError(f"{type(e).__name__}: {e}")
            error.__cause__ = e
            self.result = self._fail(error)
        return self.result

    def _fail(self, error):
        self._enter(FAILED)
        logger.error("Install failed", exc_info=error)
        message = self.config.error_message.format(error=error)
        try:
            self.host.run_in_main_thread(
                lambda: self.host.display_dialog(self.config.dialog_title, message))
        except Exception:
            logger.exception("Failed to show the error dialog")
        return install_result(FAILED, message, error)

    def _install_unsafe(self):
        self._enter(CHECKING_DEV_MODE)
        if self.manifest.has_local_dev_install():
            logger.info("Not running, because you have a vrcfury package installed in "
                        "development mode (local directory)")
            self._enter(DONE)
            return install_result(SKIPPED, "Package is installed in development mode")

        logger.info("Starting ...")
        self._enter(CLEANING_OLD)
        restarting = self.host.run_in_main_thread(self._clean_old)

        if restarting:
            self._enter(RESTART_PAUSE)
            # The host may unload and restart us while it forgets the old package.
            # Installing before that settles lets its cleanup delete the new directory.
            logger.info("Waiting %s seconds for the host to release the old package ...",
                        self.config.restart_delay)
            self.sleep(self.config.restart_delay)

        self._enter(DOWNLOADING)
        archive_path = self.fetcher.download(self.config.download_url)

        self._enter(EXTRACTING)
        staging_dir = self.fetcher.extract(archive_path)

        self.host.run_in_main_thread(lambda: self._finish(staging_dir))

        self._enter(DONE)
        logger.info("Done")
        return install_result(SUCCEEDED, "VRCFury installed")

    def _clean_old(self):
        changed = False
        changed |= self.swapper.delete_path(self.config.main_package_archive)
        changed |= self.swapper.delete_path(self.config.main_package_dir)
        changed |= self.manifest.remove_entries(True)
        self.host.trigger_resolution()
        return changed

    def _finish(self, staging_dir):
        self._enter(SWAPPING_IN)
        self.swapper.swap_in(staging_dir, self.config.main_package_dir)

        self._enter(CLEANING_LEGACY)
        self.manifest.remove_entries(False)
        self.swapper.delete_path(self.host.guid_to_asset_path(self.config.legacy_installer_guid))
        for path in self.config.legacy_paths:
            self.swapper.delete_path(path)

        self._enter(RE_RESOLVING)
        self.host.trigger_resolution()


def launch(host, config=None, **kwargs):
    """Start an install for the given host. Call once per host load.

    Args:
        host: HostBridge - Host services
        config: Optional InstallerConfig
        **kwargs: Passed through to InstallOrchestrator

    Returns:
        InstallOrchestrator - The running orchestrator; its thread attribute can be joined
    """
    orchestrator = InstallOrchestrator(host, config=config, **kwargs)
    orchestrator.start()
    return orchestrator
