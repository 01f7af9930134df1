"""Datatypes for detected faces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np


@dataclass
class Face:
    """Single detected face in absolute pixel coordinates (x1, y1, x2, y2).

    Attributes
    ----------
    x1, y1, x2, y2 : float
        Top-left (x1, y1) and bottom-right (x2, y2) corners in pixels.
        Expected invariant: x2 > x1, y2 > y1.
    score : float
        Confidence score in [0, 1]. The Haar backend has no per-box
        confidence and derives it from neighbour support, n / (n + min_neighbors).
    label : str
        Which model produced the box (default: "face").
    """

    x1: float
    y1: float
    x2: float
    y2: float
    score: float = 1.0
    label: str = "face"

    @property
    def width(self) -> float:
        return max(0.0, self.x2 - self.x1)

    @property
    def height(self) -> float:
        return max(0.0, self.y2 - self.y1)

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        return 0.5 * (self.x1 + self.x2), 0.5 * (self.y1 + self.y2)

    def to_xyxy(self) -> np.ndarray:
        """Return [x1, y1, x2, y2] as float32 array."""
        return np.array([self.x1, self.y1, self.x2, self.y2], dtype=np.float32)

    def clip(self, image_w: int, image_h: int) -> "Face":
        """Return a new face clipped to image bounds [0, W]×[0, H]."""
        x1 = float(np.clip(self.x1, 0, image_w))
        y1 = float(np.clip(self.y1, 0, image_h))
        x2 = float(np.clip(self.x2, 0, image_w))
        y2 = float(np.clip(self.y2, 0, image_h))
        return Face(x1, y1, x2, y2, self.score, self.label)

    @staticmethod
    def from_xyxy(box: Iterable[float], score: float = 1.0, label: str = "face") -> "Face":
        x1, y1, x2, y2 = [float(v) for v in box]
        return Face(x1, y1, x2, y2, float(score), label)

    @staticmethod
    def from_xywh(xywh: Iterable[float], score: float = 1.0, label: str = "face") -> "Face":
        """Create a face from [x, y, w, h], the layout OpenCV cascades return."""
        x, y, w, h = [float(v) for v in xywh]
        return Face(x, y, x + w, y + h, float(score), label)

    @staticmethod
    def stack(faces: List["Face"]) -> Tuple[np.ndarray, np.ndarray]:
        """Convert faces to (boxes[N,4], scores[N]) arrays."""
        if not faces:
            return np.zeros((0, 4), dtype=np.float32), np.zeros((0,), dtype=np.float32)
        boxes = np.stack([f.to_xyxy() for f in faces]).astype(np.float32, copy=False)
        scores = np.array([f.score for f in faces], dtype=np.float32)
        return boxes, scores
