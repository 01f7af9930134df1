"""Capture → detect → react workflow.

The controller owns the selected image path and wires four user actions to
their collaborators. It has no Qt dependency: the window injects Qt-backed
collaborators, tests inject stubs.
"""

from __future__ import annotations

import enum
import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Sequence

from .config import SEARCH_URL
from .detection.types import Face

logger = logging.getLogger(__name__)
detect_log = logging.getLogger("face_capture.detect")

IMAGE_CONTENT_FILTER = "image/*"
CAPTURE_MIME_TYPE = "image/jpeg"


class Notification(str, enum.Enum):
    FACE_DETECTED = "Face detected!"
    NO_FACE = "No face found"
    DETECTION_FAILED = "Face detection failed"


class NoImageSelectedError(ValueError):
    """Detection was requested before any image was selected."""


# ---- collaborator contracts -------------------------------------------------

class MediaStoreLike(Protocol):
    def create_image_reference(self, display_name: Optional[str] = None,
                               mime_type: str = CAPTURE_MIME_TYPE) -> Optional[Path]: ...


class CameraLike(Protocol):
    def take_picture(self, destination: Path) -> bool: ...


class PickerLike(Protocol):
    def __call__(self, content_filter: str) -> Optional[Path]: ...


class VisionServiceLike(Protocol):
    def process(self, reference: Path) -> Sequence[Face]: ...


Notifier = Callable[[Notification], None]
Dispatcher = Callable[[Callable[[], None]], None]
UrlOpener = Callable[[str], None]


def call_now(fn: Callable[[], None]) -> None:
    """Dispatcher that runs the completion on whatever thread finished the work."""
    fn()


class CaptureController:
    """Holds the selected image and runs capture, pick, detect and search."""

    def __init__(
        self,
        media_store: MediaStoreLike,
        camera: CameraLike,
        picker: PickerLike,
        vision: VisionServiceLike,
        open_url: UrlOpener,
        notify: Notifier,
        dispatch: Dispatcher = call_now,
        executor: Optional[Executor] = None,
    ) -> None:
        self._media_store = media_store
        self._camera = camera
        self._picker = picker
        self._vision = vision
        self._open_url = open_url
        self._notify = notify
        self._dispatch = dispatch
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="face-detect")

        self._selected: Optional[Path] = None
        self._listeners: List[Callable[[Optional[Path]], None]] = []

    # ---- selection state ----
    @property
    def selected_image(self) -> Optional[Path]:
        return self._selected

    @property
    def has_selection(self) -> bool:
        return self._selected is not None

    def on_selection_changed(self, listener: Callable[[Optional[Path]], None]) -> None:
        self._listeners.append(listener)

    def _select(self, reference: Path) -> None:
        # the previous file is left where it is
        self._selected = Path(reference)
        logger.info("Selected image: %s", self._selected)
        for listener in self._listeners:
            listener(self._selected)

    # ---- actions ----
    def request_camera_capture(self) -> bool:
        """Capture a photo into a new media-store slot; True if it became the selection."""
        destination = self._media_store.create_image_reference(mime_type=CAPTURE_MIME_TYPE)
        if destination is None:
            logger.warning("Media store returned no destination; capture skipped")
            return False
        if not self._camera.take_picture(destination):
            logger.debug("Camera capture cancelled or failed for %s", destination)
            return False
        self._select(destination)
        return True

    def request_gallery_pick(self) -> bool:
        """Let the user pick an image; True if it became the selection."""
        picked = self._picker(IMAGE_CONTENT_FILTER)
        if picked is None:
            logger.debug("Gallery pick cancelled")
            return False
        self._select(Path(picked))
        return True

    def submit_for_detection(self, reference: Optional[Path] = None) -> None:
        """Start face detection in the background; the outcome arrives as a notification.

        Nothing is returned and nothing is awaited. Several submissions may run
        at once; each reports against the reference it was started with.
        """
        reference = reference if reference is not None else self._selected
        if reference is None:
            raise NoImageSelectedError("Select or capture an image first")

        reference = Path(reference)
        logger.debug("Submitting %s for face detection", reference)
        future = self._executor.submit(self._vision.process, reference)
        future.add_done_callback(
            lambda fut: self._dispatch(partial(self._on_detection_done, reference, fut))
        )

    def _on_detection_done(self, reference: Path, future: Future) -> None:
        if future.cancelled():
            logger.debug("Detection for %s dropped at shutdown", reference)
            return
        try:
            faces = future.result()
        except Exception as e:
            detect_log.error("Failed", exc_info=e)
            self._notify(Notification.DETECTION_FAILED)
            return

        if faces:
            detect_log.debug("Face found")
            logger.info("%d face(s) detected in %s", len(faces), reference)
            self._notify(Notification.FACE_DETECTED)
        else:
            self._notify(Notification.NO_FACE)

    def open_external_image_search(self) -> None:
        self._open_url(SEARCH_URL)

    def close(self, wait: bool = True) -> None:
        """Stop the worker pool (also an injected one).

        With wait=False running detections finish in the background and their
        completions are still dispatched; queued ones are dropped.
        """
        self._executor.shutdown(wait=wait, cancel_futures=not wait)
