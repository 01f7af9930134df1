from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

MIME_EXTENSIONS: Dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/bmp": ".bmp",
    "image/tiff": ".tif",
    "image/webp": ".webp",
}


class MediaStore:
    """Allocates writable destinations for captured photos in a pictures folder.

    Only a path is handed out; the camera creates the file. Nothing here
    deletes files, so earlier captures stay on disk.
    """

    def __init__(self, root: str | Path, name_prefix: str = "face_capture_") -> None:
        self.root = Path(root)
        self.name_prefix = name_prefix

    def default_display_name(self) -> str:
        return f"{self.name_prefix}{int(time.time() * 1000)}"

    def create_image_reference(self, display_name: Optional[str] = None,
                               mime_type: str = "image/jpeg") -> Optional[Path]:
        """Return a fresh, not yet existing path, or None if none can be allocated."""
        ext = MIME_EXTENSIONS.get(mime_type.lower())
        if ext is None:
            logger.warning("Unsupported MIME type for capture: %s", mime_type)
            return None

        name = Path(display_name or self.default_display_name()).name
        if not Path(name).suffix:
            name += ext

        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Cannot create pictures directory %s: %s", self.root, e)
            return None

        target = self.root / name
        stem, suffix = target.stem, target.suffix
        n = 1
        while target.exists():
            target = self.root / f"{stem}_{n}{suffix}"
            n += 1
        logger.debug("Allocated capture destination %s", target)
        return target
