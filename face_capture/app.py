from __future__ import annotations

import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QObject, Qt, QUrl, Signal, Slot
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import QApplication, QMainWindow, QMessageBox

from face_capture.config import AppConfig
from face_capture.controller import CaptureController, Notification, NoImageSelectedError
from face_capture.detection.service import VisionService
from face_capture.services.media_store import MediaStore
from face_capture.ui.camera_dialog import DialogCamera
from face_capture.ui.capture_panel import CapturePanel
from face_capture.ui.pickers import GalleryPicker

logger = logging.getLogger(__name__)


class QtDispatcher(QObject):
    """Posts callables from worker threads onto the thread that owns this object."""

    _posted = Signal(object)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._posted.connect(self._run, Qt.QueuedConnection)

    def __call__(self, fn: Callable[[], None]) -> None:
        self._posted.emit(fn)

    @Slot(object)
    def _run(self, fn: Callable[[], None]) -> None:
        fn()


def open_in_browser(url: str) -> None:
    if not QDesktopServices.openUrl(QUrl(url)):
        logger.warning("No handler accepted %s", url)


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        super().__init__()
        self.config = config or AppConfig()
        self.setWindowTitle("Face Recognition")
        self.resize(480, 720)

        self.panel = CapturePanel(self)
        self.setCentralWidget(self.panel)
        self.dispatcher = QtDispatcher(self)

        self.controller = CaptureController(
            media_store=MediaStore(self.config.storage.resolve_dir(), self.config.storage.name_prefix),
            camera=DialogCamera(self.config.camera, self),
            picker=GalleryPicker(self),
            vision=VisionService(self.config),
            open_url=open_in_browser,
            notify=self.show_toast,
            dispatch=self.dispatcher,
            executor=ThreadPoolExecutor(
                max_workers=max(1, self.config.detection_workers), thread_name_prefix="face-detect"
            ),
        )
        self.controller.on_selection_changed(self.panel.set_image)

        self.panel.captureRequested.connect(self.controller.request_camera_capture)
        self.panel.pickRequested.connect(self.controller.request_gallery_pick)
        self.panel.detectRequested.connect(self._on_detect)
        self.panel.searchRequested.connect(self.controller.open_external_image_search)

        self.statusBar().showMessage("Ready")

    def show_toast(self, note: Notification) -> None:
        self.statusBar().showMessage(note.value, self.config.toast_duration_ms)

    def _on_detect(self) -> None:
        try:
            self.controller.submit_for_detection()
        except NoImageSelectedError as e:
            QMessageBox.information(self, "Detect Face", str(e))

    def closeEvent(self, ev) -> None:  # type: ignore[override]
        # do not block the GUI on a slow inference
        self.controller.close(wait=False)
        super().closeEvent(ev)


def main(config_path: Optional[str | Path] = None) -> None:
    config = AppConfig.load_json(config_path) if config_path else AppConfig()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    win = MainWindow(config)
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
