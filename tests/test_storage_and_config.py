import numpy as np

from face_capture.config import AppConfig, preset_haar_with_profile
from face_capture.services.media_store import MediaStore
from face_capture.ui.pickers import name_filter_for
from face_capture.utils.io import safe_imread, safe_imwrite


def test_media_store_allocates_unique_jpeg_paths(tmp_path):
    store = MediaStore(tmp_path / "pics")
    first = store.create_image_reference("face_capture_1.jpg")
    assert first == tmp_path / "pics" / "face_capture_1.jpg"
    assert first.parent.is_dir() and not first.exists()

    first.write_bytes(b"x")
    second = store.create_image_reference("face_capture_1.jpg")
    assert second == tmp_path / "pics" / "face_capture_1_1.jpg"


def test_media_store_default_name_and_mime(tmp_path):
    store = MediaStore(tmp_path)
    ref = store.create_image_reference()
    assert ref.name.startswith("face_capture_") and ref.suffix == ".jpg"
    assert store.create_image_reference("shot", mime_type="image/png").name == "shot.png"
    assert store.create_image_reference("clip", mime_type="video/mp4") is None


def test_media_store_unwritable_root(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a dir")
    assert MediaStore(blocker / "sub").create_image_reference() is None


def test_imwrite_then_read(tmp_path):
    img = np.zeros((16, 24, 3), dtype=np.uint8)
    img[4:12, 6:18] = (0, 200, 50)
    path = tmp_path / "фото.png"
    assert safe_imwrite(path, img)
    back = safe_imread(path)
    assert back is not None and back.shape == img.shape
    assert safe_imread(tmp_path / "missing.png") is None


def test_config_json_file(tmp_path):
    cfg = preset_haar_with_profile()
    cfg.storage.pictures_dir = str(tmp_path)
    path = tmp_path / "config.json"
    cfg.save_json(path)

    loaded = AppConfig.load_json(path)
    assert loaded.haar.use_profile is True
    assert loaded.storage.resolve_dir() == tmp_path
    params = loaded.haar.to_params()
    assert params.min_size == (30, 30) and params.min_neighbors == 6


def test_picker_name_filters():
    assert name_filter_for("image/*").startswith("Images (")
    assert "*.jpeg" in name_filter_for("image/jpeg")
    assert name_filter_for("application/pdf") == "All files (*.*)"


def test_media_store_default_name_follows_mime(tmp_path):
    store = MediaStore(tmp_path)
    assert store.create_image_reference(mime_type="image/png").suffix == ".png"
    assert store.create_image_reference(mime_type="image/tiff").suffix == ".tif"
