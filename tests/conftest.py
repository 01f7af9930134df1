"""Shared fixtures: headless Qt and simple collaborator stubs."""

import os
from pathlib import Path
from typing import List, Optional

import numpy as np
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class StubStore:
    def __init__(self, root: Path, fail: bool = False):
        self.root = root
        self.fail = fail
        self.count = 0
        self.requests = []

    def create_image_reference(self, display_name=None, mime_type="image/jpeg"):
        self.requests.append(mime_type)
        if self.fail:
            return None
        self.count += 1
        return self.root / f"capture_{self.count}.jpg"


class StubCamera:
    """Returns the queued outcomes in order."""

    def __init__(self, outcomes: List[bool]):
        self.outcomes = list(outcomes)
        self.destinations = []

    def take_picture(self, destination):
        self.destinations.append(destination)
        return self.outcomes.pop(0)


class StubPicker:
    def __init__(self, results: List[Optional[Path]]):
        self.results = list(results)
        self.filters = []

    def __call__(self, content_filter):
        self.filters.append(content_filter)
        return self.results.pop(0)


class StubVision:
    def __init__(self, faces=None, error: Optional[Exception] = None):
        self.faces = faces if faces is not None else []
        self.error = error
        self.seen = []

    def process(self, reference):
        self.seen.append(reference)
        if self.error is not None:
            raise self.error
        return self.faces


@pytest.fixture
def blank_image():
    return np.full((240, 320, 3), 127, dtype=np.uint8)


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app
