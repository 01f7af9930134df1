from __future__ import annotations

import logging
import os
import sys
import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple

import numpy as np

from .types import Face

_model_lock = threading.Lock()

logger = logging.getLogger(__name__)


class YoloNotAvailableError(RuntimeError):
    """Raised when Ultralytics is not installed or not importable."""


def resource_path(rel_path: str) -> str:
    """Resolve bundled model files both from source and from a frozen build."""
    if hasattr(sys, "_MEIPASS"):
        return os.path.join(sys._MEIPASS, rel_path)
    return os.path.join(os.path.abspath("."), rel_path)


def _require_ultralytics():
    """Import Ultralytics YOLO and return the class.

    Raises
    ------
    YoloNotAvailableError
        If 'ultralytics' is not installed. The message contains install hint.
    """
    try:
        from ultralytics import YOLO  # type: ignore
        return YOLO
    except Exception as exc:  # pragma: no cover
        raise YoloNotAvailableError(
            "Ultralytics is not available. Install it with:\n"
            "    pip install ultralytics\n"
            "and provide face weights (e.g., 'models/yolov8n-face.pt')."
        ) from exc


@lru_cache(maxsize=4)
def _load_yolo(weights_path: str):
    YOLO = _require_ultralytics()
    with _model_lock:
        logger.info("Loading YOLO face weights: %s", weights_path)
        return YOLO(weights_path)


@dataclass(frozen=True)
class YOLOParams:
    """YOLO face inference parameters.

    Attributes
    ----------
    weights : str
        Path to face-trained weights. Relative paths resolve against the
        application directory (or the frozen bundle).
    conf : float
        Confidence threshold at model level (0..1).
    iou : float
        NMS IoU inside the model (0..1).
    imgsz : int
        Inference image size (long side).
    keep_classes : Optional[Tuple[int, ...]]
        Class IDs to keep. Face models have a single class 0; None keeps all.
    min_face_size : float
        Boxes narrower or shorter than this (px) are dropped.
    """

    weights: str = "models/yolov8n-face.pt"
    conf: float = 0.35
    iou: float = 0.50
    imgsz: int = 640
    keep_classes: Optional[Tuple[int, ...]] = (0,)
    min_face_size: float = 20.0
    label: str = "face_yolo"


def _coerce_np(x) -> np.ndarray:
    """Convert torch/ultralytics tensor-like to np.ndarray (cpu)."""
    try:
        return x.cpu().numpy()  # type: ignore[attr-defined]
    except AttributeError:
        return np.asarray(x)


def _post_filter(xyxy: np.ndarray, scores: np.ndarray, classes: np.ndarray,
                 p: YOLOParams) -> List[Face]:
    faces: List[Face] = []
    for i in range(xyxy.shape[0]):
        cls_id = int(classes[i]) if classes is not None and classes.size else -1
        if p.keep_classes is not None and cls_id not in p.keep_classes:
            continue
        face = Face.from_xyxy(xyxy[i, :4], score=float(scores[i]), label=p.label)
        if face.width < p.min_face_size or face.height < p.min_face_size:
            continue
        faces.append(face)
    return faces


def detect_faces_by_yolo(image_bgr: np.ndarray, params: YOLOParams = YOLOParams()) -> List[Face]:
    """Run an Ultralytics YOLO face model.

    Raises
    ------
    YoloNotAvailableError
        If ultralytics is missing.
    """
    _require_ultralytics()
    weights = params.weights if os.path.isabs(params.weights) else resource_path(params.weights)
    model = _load_yolo(weights)

    results = model.predict(
        source=image_bgr,
        imgsz=int(params.imgsz),
        conf=float(params.conf),
        iou=float(params.iou),
        verbose=False,
    )
    if not results:
        return []

    boxes = results[0].boxes
    faces = _post_filter(
        _coerce_np(boxes.xyxy), _coerce_np(boxes.conf), _coerce_np(boxes.cls), params
    )
    h, w = image_bgr.shape[:2]
    faces = [f.clip(w, h) for f in faces]
    faces.sort(key=lambda f: -f.score)
    return faces
