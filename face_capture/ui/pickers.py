from __future__ import annotations

from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import QFileDialog, QWidget

from ..services.media_store import MIME_EXTENSIONS

IMAGE_PATTERNS = "*.png *.jpg *.jpeg *.bmp *.tif *.tiff *.webp"


def name_filter_for(content_filter: str) -> str:
    """Translate a MIME filter ("image/*", "image/png") into a Qt name filter."""
    mime = content_filter.strip().lower()
    if mime in ("image/*", "image"):
        return f"Images ({IMAGE_PATTERNS});;All files (*.*)"
    ext = MIME_EXTENSIONS.get(mime)
    if ext is None:
        return "All files (*.*)"
    patterns = "*.jpg *.jpeg" if ext == ".jpg" else ("*.tif *.tiff" if ext == ".tif" else f"*{ext}")
    return f"{mime} ({patterns})"


class GalleryPicker:
    """Media picker backed by the native file dialog."""

    def __init__(self, parent: Optional[QWidget] = None, start_dir: str = "") -> None:
        self._parent = parent
        self._start_dir = start_dir

    def __call__(self, content_filter: str) -> Optional[Path]:
        path, _ = QFileDialog.getOpenFileName(
            self._parent, "Pick image", self._start_dir, name_filter_for(content_filter)
        )
        if not path:
            return None
        self._start_dir = str(Path(path).parent)
        return Path(path)
