"""Shared fixtures: a throwaway host project, fake HTTP session and zip builder"""

import io
import itertools
import zipfile
from pathlib import Path

import pytest
import requests

from host_bridge import ProjectHost


class FakeResponse:
    def __init__(self, url, status_code=200, content=b''):
        self.url = url
        self.status_code = status_code
        self.content = content

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error for url: {self.url}")

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start:start + chunk_size]


class FakeSession:
    """Stands in for requests.Session; records every GET."""

    def __init__(self, content=b'', status_code=200):
        self.content = content
        self.status_code = status_code
        self.requests = []

    def get(self, url, stream=False):
        self.requests.append(url)
        return FakeResponse(url, self.status_code, self.content)


class RecordingHost(ProjectHost):
    """Project host that counts resolutions and keeps dialogs instead of logging them."""

    def __init__(self, project_root, **kwargs):
        super().__init__(project_root, resolver=self._resolve, **kwargs)
        self.resolutions = 0
        self.dialogs = []

    def _resolve(self):
        self.resolutions += 1

    def display_dialog(self, title, message):
        self.dialogs.append((title, message))


def make_zip(entries):
    """Build zip bytes from a {name: content} dict; names ending in '/' become directory entries."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def project(tmp_path):
    root = tmp_path / 'project'
    (root / 'Packages').mkdir(parents=True)
    (root / 'Assets').mkdir()
    return root


@pytest.fixture
def temp_paths(tmp_path):
    """Factory of fresh temp paths, like the host's unique temp path generator."""
    counter = itertools.count()
    base = tmp_path / 'Temp'

    def factory():
        return Path(base / f"tmp-{next(counter)}")

    return factory


@pytest.fixture
def host(project):
    return RecordingHost(project)
