from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import cv2
import numpy as np


def _ext(p: str | Path) -> str:
    return os.path.splitext(str(p))[-1].lower()


def safe_imread(path: str | Path) -> Optional[np.ndarray]:
    """Read an image as bytes and decode it, so non-ASCII paths work.

    Returns BGR or None when the file is missing, empty or not an image.
    """
    try:
        data = np.fromfile(str(path), dtype=np.uint8)
    except OSError:
        return None
    if data.size == 0:
        return None
    return cv2.imdecode(data, cv2.IMREAD_COLOR)


def safe_imread_first_frame(path: str | Path) -> Optional[np.ndarray]:
    """Like safe_imread, but multi-page TIFFs yield their first page as BGR."""
    p = str(path)
    if _ext(p) in (".tif", ".tiff"):
        ok, frames = cv2.imreadmulti(p, flags=cv2.IMREAD_UNCHANGED)
        if ok and frames:
            img = frames[0]
            if img.ndim == 2 or (img.ndim == 3 and img.shape[2] == 1):
                img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
            elif img.ndim == 3 and img.shape[2] == 4:
                img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
            return img
    return safe_imread(p)


def safe_imwrite(path: str | Path, bgr: np.ndarray, jpeg_quality: int = 95) -> bool:
    """Encode and write an image; the format follows the path extension."""
    ext = _ext(path) or ".jpg"
    params = [int(cv2.IMWRITE_JPEG_QUALITY), int(jpeg_quality)] if ext in (".jpg", ".jpeg") else []
    ok, buf = cv2.imencode(ext, bgr, params)
    if not ok:
        return False
    try:
        buf.tofile(str(path))
    except OSError:
        return False
    return True
