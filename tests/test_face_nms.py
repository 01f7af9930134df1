import numpy as np

from face_capture.detection.nms import merge_faces, pairwise_overlap, suppress
from face_capture.detection.types import Face


def test_iou_known_value():
    # (0,0)-(100,100) vs (50,50)-(150,150): inter 2500, union 17500
    a = np.array([[0, 0, 100, 100]], dtype=np.float32)
    b = np.array([[50, 50, 150, 150]], dtype=np.float32)
    ov = pairwise_overlap(a, b)
    assert ov.shape == (1, 1)
    assert np.isclose(ov[0, 0], 1.0 / 7.0, atol=1e-6)


def test_min_overlap_scores_nested_box_as_full():
    outer = np.array([[0, 0, 100, 100]], dtype=np.float32)
    inner = np.array([[20, 20, 60, 60]], dtype=np.float32)
    assert np.isclose(pairwise_overlap(outer, inner, "iou")[0, 0], 0.16, atol=1e-6)
    assert np.isclose(pairwise_overlap(outer, inner, "min")[0, 0], 1.0, atol=1e-6)


def test_empty_inputs():
    empty = np.zeros((0, 4), dtype=np.float32)
    one = np.array([[0, 0, 1, 1]], dtype=np.float32)
    assert pairwise_overlap(empty, one).shape == (0, 1)
    assert suppress(empty, np.zeros((0,), dtype=np.float32), 0.5).size == 0
    assert merge_faces([], 0.5) == []


def test_suppress_keeps_best_and_far_boxes():
    boxes = np.array([[0, 0, 100, 100], [10, 10, 110, 110], [200, 200, 300, 300]], dtype=np.float32)
    scores = np.array([0.9, 0.8, 0.7], dtype=np.float32)
    assert suppress(boxes, scores, 0.5).tolist() == [0, 2]


def test_equal_scores_keep_first():
    boxes = np.array([[0, 0, 10, 10], [0, 0, 10, 10]], dtype=np.float32)
    scores = np.array([0.5, 0.5], dtype=np.float32)
    assert suppress(boxes, scores, 0.3).tolist() == [0]


def test_merge_faces_drops_profile_inside_frontal():
    frontal = Face(100, 100, 200, 200, 0.8, "face")
    profile = Face(120, 110, 190, 190, 0.8, "face_profile")
    other = Face(400, 100, 480, 180, 0.6, "face_profile")
    merged = merge_faces([frontal, profile, other], threshold=0.5)
    assert merged == [frontal, other]


def test_face_geometry():
    f = Face.from_xywh([10, 20, 30, 40], score=0.5)
    assert (f.x2, f.y2) == (40.0, 60.0)
    assert f.area == 1200.0
    assert f.center == (25.0, 40.0)
    clipped = Face(-5, -5, 50, 50).clip(40, 30)
    assert (clipped.x1, clipped.y1, clipped.x2, clipped.y2) == (0.0, 0.0, 40.0, 30.0)
