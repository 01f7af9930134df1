from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QDialog, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from ..config import CameraConfig
from ..services.camera import OpenCVCamera

logger = logging.getLogger(__name__)


def _cv_to_qimage(bgr: np.ndarray) -> QImage:
    rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
    h, w = rgb.shape[:2]
    return QImage(rgb.data, w, h, 3 * w, QImage.Format_RGB888).copy()


class CameraDialog(QDialog):
    """Live camera preview; 'Take picture' writes the current frame to the destination."""

    def __init__(self, camera: OpenCVCamera, destination: Path, frame_interval_ms: int = 33,
                 parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Camera")
        self.resize(720, 600)
        self._camera = camera
        self._destination = Path(destination)
        self.saved = False

        root = QVBoxLayout(self)
        self.lbl_view = QLabel("Starting camera…")
        self.lbl_view.setAlignment(Qt.AlignCenter)
        self.lbl_view.setMinimumSize(640, 480)
        root.addWidget(self.lbl_view, 1)

        row = QHBoxLayout()
        self.btn_shoot = QPushButton("Take picture")
        self.btn_cancel = QPushButton("Cancel")
        row.addStretch(1)
        row.addWidget(self.btn_shoot)
        row.addWidget(self.btn_cancel)
        root.addLayout(row)

        self.btn_shoot.clicked.connect(self._shoot)
        self.btn_cancel.clicked.connect(self.reject)

        self._timer = QTimer(self)
        self._timer.setInterval(max(10, int(frame_interval_ms)))
        self._timer.timeout.connect(self._refresh)

    def _refresh(self) -> None:
        frame = self._camera.read()
        if frame is None:
            return
        pix = QPixmap.fromImage(_cv_to_qimage(frame))
        self.lbl_view.setPixmap(pix.scaled(self.lbl_view.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation))

    def _shoot(self) -> None:
        frame = self._camera.last_frame
        if frame is None:
            frame = self._camera.read()
        if frame is None:
            self.lbl_view.setText("No frame from camera")
            return
        self.saved = self._camera.save_frame(frame, self._destination)
        if self.saved:
            self.accept()
        else:
            self.lbl_view.setText("Could not save the picture")

    def run(self) -> bool:
        """Show modally; True only if a picture was written."""
        if not self._camera.open():
            return False
        self._timer.start()
        try:
            self.exec()
        finally:
            self._timer.stop()
            self._camera.release()
        return self.saved


class DialogCamera:
    """Camera collaborator for the controller: one modal dialog per capture, or a
    direct device grab when the config asks for headless capture."""

    def __init__(self, config: CameraConfig, parent: Optional[QWidget] = None) -> None:
        self._config = config
        self._parent = parent

    def take_picture(self, destination: Path) -> bool:
        camera = OpenCVCamera(
            device_index=self._config.device_index,
            warmup_frames=self._config.warmup_frames,
            jpeg_quality=self._config.jpeg_quality,
        )
        if self._config.headless:
            return camera.take_picture(destination)
        dialog = CameraDialog(camera, destination, self._config.frame_interval_ms, self._parent)
        ok = dialog.run()
        if not ok:
            logger.debug("Camera dialog closed without a picture")
        return ok
