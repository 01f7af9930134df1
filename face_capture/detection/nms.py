from __future__ import annotations

from typing import List, Literal, Sequence

import numpy as np

from .types import Face

__all__ = ["pairwise_overlap", "suppress", "merge_faces"]

OverlapMode = Literal["iou", "min"]


def pairwise_overlap(a: np.ndarray, b: np.ndarray, mode: OverlapMode = "iou") -> np.ndarray:
    """Overlap matrix between two sets of XYXY boxes.

    Parameters
    ----------
    a : np.ndarray, shape (N, 4)
    b : np.ndarray, shape (M, 4)
    mode : {"iou", "min"}
        "iou" divides the intersection by the union. "min" divides it by the
        smaller of the two areas, so a box nested inside another scores 1.0.
        Frontal and profile cascades often fire on the same head with one box
        inside the other, which plain IoU misses.

    Returns
    -------
    np.ndarray, shape (N, M), values in [0, 1].
    """
    if a.size == 0 or b.size == 0:
        return np.zeros((a.shape[0], b.shape[0]), dtype=np.float32)

    a = a.astype(np.float32, copy=False)
    b = b.astype(np.float32, copy=False)

    area_a = np.prod(np.clip(a[:, 2:4] - a[:, 0:2], 0, None), axis=1)
    area_b = np.prod(np.clip(b[:, 2:4] - b[:, 0:2], 0, None), axis=1)

    lo = np.maximum(a[:, None, 0:2], b[None, :, 0:2])
    hi = np.minimum(a[:, None, 2:4], b[None, :, 2:4])
    inter = np.prod(np.clip(hi - lo, 0, None), axis=2)

    if mode == "min":
        denom = np.minimum(area_a[:, None], area_b[None, :])
    else:
        denom = area_a[:, None] + area_b[None, :] - inter
    return np.where(denom > 0, inter / np.where(denom > 0, denom, 1.0), 0.0).astype(np.float32)


def suppress(boxes: np.ndarray, scores: np.ndarray, threshold: float,
             mode: OverlapMode = "iou") -> np.ndarray:
    """Greedy suppression; returns kept indices, best score first.

    Equal scores keep the lower original index, so frontal boxes (fed first)
    beat profile boxes of the same head.
    """
    if boxes.size == 0:
        return np.zeros((0,), dtype=np.int64)

    scores = scores.astype(np.float32, copy=False)
    order = np.lexsort((np.arange(scores.shape[0]), -scores)).astype(np.int64)

    keep: List[int] = []
    while order.size:
        top = int(order[0])
        keep.append(top)
        rest = order[1:]
        if not rest.size:
            break
        ov = pairwise_overlap(boxes[top][None, :], boxes[rest], mode).reshape(-1)
        order = rest[ov <= float(threshold)]
    return np.array(keep, dtype=np.int64)


def merge_faces(faces: Sequence[Face], threshold: float, mode: OverlapMode = "min") -> List[Face]:
    """Drop faces that overlap a better-scoring face by more than `threshold`."""
    faces = list(faces)
    boxes, scores = Face.stack(faces)
    return [faces[i] for i in suppress(boxes, scores, threshold, mode).tolist()]
