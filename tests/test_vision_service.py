import importlib.util

import cv2
import pytest

from face_capture.config import AppConfig, preset_yolo_face
from face_capture.detection.service import ImageLoadError, VisionService
from face_capture.detection.yolo import YoloNotAvailableError


def test_blank_photo_has_no_faces(tmp_path, blank_image):
    path = tmp_path / "blank.png"
    assert cv2.imwrite(str(path), blank_image)
    assert VisionService().process(path) == []


def test_unreadable_reference_raises(tmp_path):
    bad = tmp_path / "not_an_image.jpg"
    bad.write_bytes(b"definitely not jpeg")
    with pytest.raises(ImageLoadError):
        VisionService().process(bad)
    with pytest.raises(ImageLoadError):
        VisionService().process(tmp_path / "missing.jpg")


def test_unknown_backend_rejected():
    with pytest.raises(ValueError):
        VisionService(AppConfig(backend="magic"))


def test_yolo_backend_without_ultralytics(tmp_path, blank_image):
    if importlib.util.find_spec("ultralytics") is not None:
        pytest.skip("Ultralytics installed; guard test not applicable.")
    path = tmp_path / "blank.png"
    cv2.imwrite(str(path), blank_image)
    with pytest.raises(YoloNotAvailableError):
        VisionService(preset_yolo_face()).process(path)


def test_installed_opencv_has_cascades():
    # OpenCV 5 drops CascadeClassifier; the default backend needs 4.x
    assert int(cv2.__version__.split(".")[0]) == 4
    assert hasattr(cv2, "CascadeClassifier")
