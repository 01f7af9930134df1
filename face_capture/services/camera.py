from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from ..utils.io import safe_imwrite

logger = logging.getLogger(__name__)


class OpenCVCamera:
    """Thin wrapper over cv2.VideoCapture that can save a still to a path."""

    def __init__(self, device_index: int = 0, warmup_frames: int = 5, jpeg_quality: int = 95) -> None:
        self.device_index = device_index
        self.warmup_frames = warmup_frames
        self.jpeg_quality = jpeg_quality
        self._cap: Optional[cv2.VideoCapture] = None
        self._last: Optional[np.ndarray] = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def open(self) -> bool:
        if self.is_open:
            return True
        cap = cv2.VideoCapture(self.device_index)
        if not cap.isOpened():
            logger.warning("Camera %s could not be opened", self.device_index)
            cap.release()
            return False
        # first frames are often dark while auto exposure settles
        for _ in range(max(0, self.warmup_frames)):
            cap.read()
        self._cap = cap
        return True

    def read(self) -> Optional[np.ndarray]:
        """Grab the current frame (BGR) or None."""
        if not self.is_open:
            return None
        ok, frame = self._cap.read()
        if not ok or frame is None:
            return None
        self._last = frame
        return frame

    @property
    def last_frame(self) -> Optional[np.ndarray]:
        return self._last

    def save_frame(self, frame: np.ndarray, destination: str | Path) -> bool:
        if not safe_imwrite(destination, frame, self.jpeg_quality):
            logger.warning("Failed to write capture to %s", destination)
            return False
        logger.info("Captured photo saved to %s", destination)
        return True

    def take_picture(self, destination: str | Path) -> bool:
        """Capture one still into `destination` without any UI."""
        opened_here = not self.is_open
        if not self.open():
            return False
        try:
            frame = self.read()
            if frame is None:
                logger.warning("Camera %s returned no frame", self.device_index)
                return False
            return self.save_frame(frame, destination)
        finally:
            if opened_here:
                self.release()

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
