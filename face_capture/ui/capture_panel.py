from __future__ import annotations

from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont, QPixmap
from PySide6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget

PREVIEW_SIZE = 200


class CapturePanel(QWidget):
    """Screen body: capture/pick buttons, preview and Detect only when an image exists, search."""

    captureRequested = Signal()
    pickRequested = Signal()
    detectRequested = Signal()
    searchRequested = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._image: Optional[Path] = None
        self._build_ui()
        self.set_image(None)

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(16, 16, 16, 16)
        root.addStretch(1)

        self.lbl_title = QLabel("Face Recognition Screen")
        font = QFont()
        font.setPointSize(18)
        self.lbl_title.setFont(font)
        self.lbl_title.setAlignment(Qt.AlignCenter)
        root.addWidget(self.lbl_title)
        root.addSpacing(16)

        self.btn_capture = QPushButton("Capture Face from Camera")
        self.btn_pick = QPushButton("Pick Image from Gallery")
        root.addWidget(self.btn_capture, 0, Qt.AlignHCenter)
        root.addSpacing(8)
        root.addWidget(self.btn_pick, 0, Qt.AlignHCenter)
        root.addSpacing(16)

        self.lbl_preview = QLabel()
        self.lbl_preview.setFixedSize(PREVIEW_SIZE, PREVIEW_SIZE)
        self.lbl_preview.setAlignment(Qt.AlignCenter)
        self.btn_detect = QPushButton("Detect Face")
        root.addWidget(self.lbl_preview, 0, Qt.AlignHCenter)
        root.addSpacing(8)
        root.addWidget(self.btn_detect, 0, Qt.AlignHCenter)
        root.addSpacing(16)

        self.btn_search = QPushButton("Search with Google Image")
        root.addWidget(self.btn_search, 0, Qt.AlignHCenter)

        self.btn_capture.clicked.connect(self.captureRequested.emit)
        self.btn_pick.clicked.connect(self.pickRequested.emit)
        self.btn_detect.clicked.connect(self.detectRequested.emit)
        self.btn_search.clicked.connect(self.searchRequested.emit)

    # ---- state ----
    @property
    def image(self) -> Optional[Path]:
        return self._image

    @property
    def detect_available(self) -> bool:
        return self._image is not None and not self.btn_detect.isHidden()

    def set_image(self, path: Optional[Path]) -> None:
        """Show preview + Detect for `path`; hide both when it is None."""
        self._image = path
        if path is None:
            self.lbl_preview.clear()
            self.lbl_preview.hide()
            self.btn_detect.hide()
            return

        pix = QPixmap(str(path))
        if pix.isNull():
            self.lbl_preview.setText(Path(path).name)
        else:
            self.lbl_preview.setPixmap(
                pix.scaled(PREVIEW_SIZE, PREVIEW_SIZE, Qt.KeepAspectRatio, Qt.SmoothTransformation)
            )
        self.lbl_preview.show()
        self.btn_detect.show()
