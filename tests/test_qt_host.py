"""Qt host binding, run on the offscreen platform"""

import os
import threading
import time

import pytest

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')
QtWidgets = pytest.importorskip('PyQt6.QtWidgets')

import qt_host  # noqa: E402
from qt_host import InstallWorker, QtHostBridge, run_standalone  # noqa: E402


@pytest.fixture(scope='module')
def qapp():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


def _process_until(qapp, done, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not done():
        qapp.processEvents()
        if time.monotonic() > deadline:
            pytest.fail("timed out waiting for the Qt event loop")
        time.sleep(0.005)


def test_worker_calls_run_on_gui_thread(qapp, project):
    host = QtHostBridge(project)
    seen = {}

    def worker():
        seen['thread'] = host.run_in_main_thread(lambda: threading.current_thread())

    thread = threading.Thread(target=worker)
    thread.start()
    _process_until(qapp, lambda: not thread.is_alive())
    host.stop()

    assert seen['thread'] is threading.current_thread()


class FakeOrchestrator:
    def __init__(self, host, result):
        self.host = host
        self.result = result

    def run(self):
        self.host.run_in_main_thread(self.host.trigger_resolution)
        return self.result


def test_install_worker_emits_result(qapp, project):
    calls = []
    host = QtHostBridge(project, resolver=lambda: calls.append(threading.current_thread()))
    worker = InstallWorker(FakeOrchestrator(host, {'status': 'succeeded'}))
    results = []
    worker.finished.connect(results.append)

    worker.start()
    _process_until(qapp, lambda: bool(results))
    worker.wait()
    host.stop()

    assert results == [{'status': 'succeeded'}]
    assert calls == [threading.current_thread()]


@pytest.mark.parametrize("status, exit_code", [('succeeded', 0), ('skipped', 0), ('failed', 1)])
def test_run_standalone_exit_code(qapp, project, monkeypatch, status, exit_code):
    monkeypatch.setattr(qt_host, 'setup_logging', lambda: None)
    monkeypatch.setattr(qt_host, 'InstallOrchestrator', lambda host: FakeOrchestrator(host, {'status': status}))

    assert run_standalone(project) == exit_code
