"""Vision inference service: image path in, detected faces out."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..config import AppConfig
from ..utils.io import safe_imread_first_frame
from .haar import detect_faces_by_haar
from .types import Face

logger = logging.getLogger(__name__)

BACKENDS = ("haar", "yolo")


class ImageLoadError(RuntimeError):
    """Raised when the referenced file cannot be decoded as an image."""


class VisionService:
    """Runs the configured face detector on an image reference.

    `process` is called from worker threads; it keeps no per-call state.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        if self._config.backend not in BACKENDS:
            raise ValueError(f"Unknown backend {self._config.backend!r}; expected one of {BACKENDS}")

    @property
    def backend(self) -> str:
        return self._config.backend

    def process(self, reference: str | Path) -> List[Face]:
        bgr = safe_imread_first_frame(reference)
        if bgr is None:
            raise ImageLoadError(f"Cannot read image: {reference}")

        if self._config.backend == "yolo":
            from .yolo import detect_faces_by_yolo
            faces = detect_faces_by_yolo(bgr, self._config.yolo.to_params())
        else:
            faces = detect_faces_by_haar(bgr, self._config.haar.to_params())

        h, w = bgr.shape[:2]
        logger.debug("%s: %d face(s) in %dx%d image %s", self.backend, len(faces), w, h, reference)
        return faces
