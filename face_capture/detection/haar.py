from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Tuple

import cv2
import numpy as np

from .nms import merge_faces
from .types import Face

logger = logging.getLogger(__name__)

_cascade_lock = threading.Lock()

FRONTAL_CASCADE = "haarcascade_frontalface_default.xml"
PROFILE_CASCADE = "haarcascade_profileface.xml"


class CascadeLoadError(RuntimeError):
    """Raised when an OpenCV cascade file is missing or unreadable."""


@dataclass(frozen=True)
class HaarParams:
    """Parameters for Haar-cascade face detection.

    Attributes
    ----------
    scale_factor : float
        Image pyramid step for detectMultiScale. Closer to 1.0 → slower, finer.
    min_neighbors : int
        Neighbouring hits a candidate needs to be kept. Higher → fewer false faces.
    min_size : Tuple[int, int]
        Smallest face (w, h) in pixels.
    use_profile : bool
        Also run the profile cascade on the image and its mirror, so faces
        turned either way are found.
    merge_threshold : float
        Overlap (intersection over smaller box) above which boxes from the
        different cascades are treated as the same face.
    clahe_clip_limit, clahe_tile_grid :
        Local contrast equalisation before the cascades run.
    """

    scale_factor: float = 1.1
    min_neighbors: int = 5
    min_size: Tuple[int, int] = (30, 30)
    use_profile: bool = False
    merge_threshold: float = 0.5
    clahe_clip_limit: float = 2.0
    clahe_tile_grid: Tuple[int, int] = (8, 8)


def to_gray_clahe(bgr: np.ndarray, clip: float, tile: Tuple[int, int]) -> np.ndarray:
    """Convert BGR→GRAY and apply CLAHE to improve local contrast (uint8)."""
    gray = bgr if bgr.ndim == 2 else cv2.cvtColor(bgr, cv2.COLOR_BGR2GRAY)
    clahe = cv2.createCLAHE(clipLimit=float(clip), tileGridSize=tuple(tile))
    return clahe.apply(gray)


@lru_cache(maxsize=4)
def load_cascade(name: str) -> cv2.CascadeClassifier:
    """Load one of the cascades bundled with opencv-python (cached)."""
    path = cv2.data.haarcascades + name  # type: ignore[attr-defined]
    with _cascade_lock:
        cascade = cv2.CascadeClassifier(path)
    if cascade.empty():
        raise CascadeLoadError(f"Failed to load cascade from {path}")
    logger.debug("Loaded cascade %s", path)
    return cascade


def _run_cascade(cascade: cv2.CascadeClassifier, gray: np.ndarray, p: HaarParams,
                 label: str) -> List[Face]:
    # cached classifiers are shared by the detection workers
    with _cascade_lock:
        boxes, neighbours = cascade.detectMultiScale2(
            gray,
            scaleFactor=float(p.scale_factor),
            minNeighbors=int(p.min_neighbors),
            minSize=tuple(int(v) for v in p.min_size),
        )
    faces: List[Face] = []
    for box, n in zip(boxes, np.asarray(neighbours).reshape(-1)):
        # cascades give no probability; neighbour support maps into (0, 1)
        score = float(n) / (float(n) + float(max(1, p.min_neighbors)))
        faces.append(Face.from_xywh(box, score=score, label=label))
    return faces


def detect_faces_by_haar(image_bgr: np.ndarray, params: HaarParams = HaarParams()) -> List[Face]:
    """Detect faces with OpenCV Haar cascades.

    Parameters
    ----------
    image_bgr : np.ndarray
        BGR (or single-channel) uint8 image.
    params : HaarParams

    Returns
    -------
    List[Face]
        Faces sorted by descending score. Empty when nothing is found.

    Raises
    ------
    CascadeLoadError
        If a cascade bundled with OpenCV cannot be loaded.
    """
    if image_bgr is None or image_bgr.size == 0:
        return []

    gray = to_gray_clahe(image_bgr, params.clahe_clip_limit, params.clahe_tile_grid)
    h, w = gray.shape[:2]

    faces = _run_cascade(load_cascade(FRONTAL_CASCADE), gray, params, "face")

    if params.use_profile:
        profile = load_cascade(PROFILE_CASCADE)
        faces += _run_cascade(profile, gray, params, "face_profile")
        # the profile cascade only knows one side; mirror for the other
        for f in _run_cascade(profile, cv2.flip(gray, 1), params, "face_profile"):
            faces.append(Face(w - f.x2, f.y1, w - f.x1, f.y2, f.score, f.label))
        faces = merge_faces(faces, params.merge_threshold)

    faces = [f.clip(w, h) for f in faces]
    faces.sort(key=lambda f: -f.score)
    return faces
