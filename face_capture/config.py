from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .detection.haar import HaarParams
from .detection.yolo import YOLOParams

SEARCH_URL = "https://images.google.com"


@dataclass
class HaarConfig:
    scale_factor: float = 1.1
    min_neighbors: int = 5
    min_size: Tuple[int, int] = (30, 30)
    use_profile: bool = False
    merge_threshold: float = 0.5
    clahe_clip_limit: float = 2.0
    clahe_tile_grid: Tuple[int, int] = (8, 8)

    def to_params(self) -> HaarParams:
        return HaarParams(
            scale_factor=self.scale_factor,
            min_neighbors=self.min_neighbors,
            min_size=tuple(self.min_size),
            use_profile=self.use_profile,
            merge_threshold=self.merge_threshold,
            clahe_clip_limit=self.clahe_clip_limit,
            clahe_tile_grid=tuple(self.clahe_tile_grid),
        )


@dataclass
class YOLOConfig:
    weights: str = "models/yolov8n-face.pt"
    conf: float = 0.35
    iou: float = 0.50
    imgsz: int = 640
    keep_classes: Optional[Tuple[int, ...]] = (0,)
    min_face_size: float = 20.0
    label: str = "face_yolo"

    def to_params(self) -> YOLOParams:
        return YOLOParams(
            weights=self.weights,
            conf=self.conf,
            iou=self.iou,
            imgsz=self.imgsz,
            keep_classes=tuple(self.keep_classes) if self.keep_classes is not None else None,
            min_face_size=self.min_face_size,
            label=self.label,
        )


@dataclass
class CameraConfig:
    device_index: int = 0
    warmup_frames: int = 5
    frame_interval_ms: int = 33  # live preview refresh
    jpeg_quality: int = 95
    # capture straight from the device, without the preview dialog
    headless: bool = False


@dataclass
class StorageConfig:
    # empty → ~/Pictures/FaceCapture
    pictures_dir: str = ""
    name_prefix: str = "face_capture_"

    def resolve_dir(self) -> Path:
        if self.pictures_dir:
            return Path(self.pictures_dir).expanduser()
        return Path.home() / "Pictures" / "FaceCapture"


@dataclass
class AppConfig:
    backend: str = "haar"  # "haar" | "yolo"
    haar: HaarConfig = field(default_factory=HaarConfig)
    yolo: YOLOConfig = field(default_factory=YOLOConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    toast_duration_ms: int = 2000
    detection_workers: int = 2
    log_level: str = "INFO"

    # ---- JSON I/O ----
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AppConfig":
        top = {k: v for k, v in d.items() if k not in ("haar", "yolo", "camera", "storage")}
        return AppConfig(
            haar=HaarConfig(**d.get("haar", {})),
            yolo=YOLOConfig(**d.get("yolo", {})),
            camera=CameraConfig(**d.get("camera", {})),
            storage=StorageConfig(**d.get("storage", {})),
            **top,
        )

    def save_json(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    @staticmethod
    def load_json(path: str | Path) -> "AppConfig":
        return AppConfig.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))


# ---- Presets ----

def preset_haar_with_profile() -> AppConfig:
    cfg = AppConfig()
    cfg.haar.use_profile = True
    cfg.haar.min_neighbors = 6
    return cfg


def preset_yolo_face() -> AppConfig:
    cfg = AppConfig()
    cfg.backend = "yolo"
    cfg.yolo.conf = 0.35
    cfg.yolo.imgsz = 640
    return cfg
