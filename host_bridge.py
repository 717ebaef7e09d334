"""
Host Bridge
Narrow interface to the host application: main-thread dispatch, package
re-resolution, dialogs, temp paths and asset lookups
"""

import logging
import queue
import re
import threading
import uuid
from abc import ABC, abstractmethod
from concurrent.futures import Future
from pathlib import Path

logger = logging.getLogger(__name__)

GUID_LINE = re.compile(r'^guid:\s*([0-9a-fA-F]+)\s*$', re.MULTILINE)


class MainThreadDispatcher:
    """Work queue handing callables from worker threads to the main thread.

    Workers call ``call()`` and block on a future; the main thread calls
    ``drain()`` once per tick, running pending work in the order it was queued.
    """

    def __init__(self, owner_thread=None):
        """Initialize dispatcher.

        Args:
            owner_thread: Optional threading.Thread - Thread that drains the queue
                (defaults to the thread creating the dispatcher)
        """
        self.owner_thread = owner_thread or threading.current_thread()
        self._queue = queue.Queue()

    def submit(self, fun):
        """Queue a callable for the main thread.

        Args:
            fun: callable - Function taking no arguments

        Returns:
            concurrent.futures.Future - Resolved with the return value or exception of fun
        """
        future = Future()
        self._queue.put((fun, future))
        return future

    def call(self, fun):
        """Run fun on the main thread and wait for its result, re-raising its exception."""
        if threading.current_thread() is self.owner_thread:
            return fun()
        return self.submit(fun).result()

    def drain(self):
        """Run every queued callable. Must be called from the owner thread.

        Returns:
            int - Number of callables executed
        """
        count = 0
        while True:
            try:
                fun, future = self._queue.get_nowait()
            except queue.Empty:
                return count
            if future.set_running_or_notify_cancel():
                try:
                    future.set_result(fun())
                except BaseException as e:
                    future.set_exception(e)
            count += 1

    def pending(self):
        return self._queue.qsize()


class HostBridge(ABC):
    """Services the installer needs from the host application."""

    def __init__(self, project_root, dispatcher=None):
        self.project_root = Path(project_root)
        self.dispatcher = dispatcher or MainThreadDispatcher()

    def run_in_main_thread(self, fun):
        """Run fun on the host's main thread, wait for it and return its result."""
        return self.dispatcher.call(fun)

    @abstractmethod
    def trigger_resolution(self):
        """Ask the host's package manager to re-resolve packages."""

    @abstractmethod
    def display_dialog(self, title, message):
        """Show a modal dialog with a single acknowledgement button."""

    @abstractmethod
    def unique_temp_path(self):
        """Return a fresh, not yet existing path inside the project's temp folder."""

    @abstractmethod
    def guid_to_asset_path(self, guid):
        """Return the project-relative path of the asset with this GUID, or '' if unknown."""


class ProjectHost(HostBridge):
    """Host backed by the project directory only, for running without an editor.

    Dialogs go to the log and package resolution calls an optional callback.
    """

    def __init__(self, project_root, resolver=None, temp_dir='Temp', dispatcher=None):
        """Initialize project host.

        Args:
            project_root: str/Path - Root directory of the host project
            resolver: Optional callable - Called with no arguments to re-resolve packages
            temp_dir: str - Project-relative temp folder
            dispatcher: Optional MainThreadDispatcher - Shared dispatcher
        """
        super().__init__(project_root, dispatcher)
        self.resolver = resolver
        self.temp_dir = self.project_root / temp_dir

    def trigger_resolution(self):
        logger.info("Re-resolving packages ...")
        if self.resolver is not None:
            self.resolver()

    def display_dialog(self, title, message):
        logger.error("%s: %s", title, message)

    def unique_temp_path(self):
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        while True:
            candidate = self.temp_dir / f"UnityTempFile-{uuid.uuid4().hex}"
            if not candidate.exists():
                return candidate

    def guid_to_asset_path(self, guid):
        """Find an asset by the GUID recorded in its .meta file.

        Args:
            guid: str - Asset GUID

        Returns:
            str - Project-relative POSIX path of the asset, '' if not found
        """
        guid = guid.lower()
        for folder in ('Assets', 'Packages'):
            base = self.project_root / folder
            if not base.is_dir():
                continue
            for meta in base.rglob('*.meta'):
                try:
                    text = meta.read_text(encoding='utf-8', errors='replace')
                except OSError:
                    continue
                match = GUID_LINE.search(text)
                if match and match.group(1).lower() == guid:
                    asset = meta.with_suffix('')
                    return asset.relative_to(self.project_root).as_posix()
        return ''
