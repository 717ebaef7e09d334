"""
Qt Host
PyQt6 binding of the host bridge: main-thread dispatch through a QTimer,
QMessageBox dialogs and a QThread worker running the install
"""

import logging
import sys

from PyQt6.QtCore import QThread, QTimer, pyqtSignal
from PyQt6.QtWidgets import QApplication, QMessageBox

from host_bridge import ProjectHost
from install_orchestrator import FAILED, InstallOrchestrator
from installer_logging import setup_logging

logger = logging.getLogger(__name__)

DRAIN_INTERVAL_MS = 10


class QtHostBridge(ProjectHost):
    """Host whose main thread is the Qt GUI thread. Construct it on that thread."""

    def __init__(self, project_root, resolver=None, temp_dir='Temp'):
        super().__init__(project_root, resolver=resolver, temp_dir=temp_dir)
        self.timer = QTimer()
        self.timer.setInterval(DRAIN_INTERVAL_MS)
        self.timer.timeout.connect(self.dispatcher.drain)
        self.timer.start()

    def display_dialog(self, title, message):
        QMessageBox.warning(None, title, message, QMessageBox.StandardButton.Ok)

    def stop(self):
        """Stop draining; run whatever is still queued first."""
        self.dispatcher.drain()
        self.timer.stop()


class InstallWorker(QThread):
    """Thread worker for one install run.

    Signals:
        finished(result) - Install complete, result dict from InstallOrchestrator.run
    """
    finished = pyqtSignal(dict)

    def __init__(self, orchestrator):
        """Initialize install worker.

        Args:
            orchestrator: InstallOrchestrator - Orchestrator to run
        """
        super().__init__()
        self.orchestrator = orchestrator

    def run(self):
        """Run the install and emit finished with its result."""
        self.finished.emit(self.orchestrator.run())


def run_standalone(project_root, resolver=None):
    """Run one install in a Qt event loop, for hosts without an editor of their own.

    Args:
        project_root: str/Path - Root directory of the project
        resolver: Optional callable - Re-resolves packages after each cleanup

    Returns:
        int - 0 on success or skip, 1 if the install failed
    """
    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("VRCFury Installer")
    setup_logging()

    host = QtHostBridge(project_root, resolver=resolver)
    worker = InstallWorker(InstallOrchestrator(host))
    outcome = {}

    def on_finished(result):
        outcome.update(result)
        app.quit()

    worker.finished.connect(on_finished)
    worker.start()
    app.exec()
    worker.wait()
    host.stop()

    return 1 if outcome.get('status') == FAILED else 0
