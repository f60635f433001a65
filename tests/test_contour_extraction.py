import cv2
import numpy as np
import pytest

from config import SilhouetteCodes
from peoplefinder.contour_extraction import ContourExtractor, to_grayscale
from peoplefinder.dataset import load_dataset_files, load_image, search_dataset_files
from peoplefinder.silhouette import SilhouetteIndex

from conftest import ROWS, COLS, make_rect_image


def make_frame():
    """Black frame with a tall rectangle and a small square."""
    frame = np.zeros((200, 200, 3), dtype=np.uint8)
    cv2.rectangle(frame, (30, 20), (70, 160), (255, 255, 255), -1)
    cv2.rectangle(frame, (120, 20), (140, 40), (255, 255, 255), -1)
    return frame


def test_to_grayscale_handles_channel_layouts():
    gray = np.full((4, 4), 7, dtype=np.uint8)
    assert to_grayscale(gray).shape == (4, 4)
    assert to_grayscale(np.zeros((4, 4, 3), dtype=np.uint8)).shape == (4, 4)
    assert to_grayscale(np.zeros((4, 4, 4), dtype=np.uint8)).shape == (4, 4)

    copy = to_grayscale(gray)
    copy[0, 0] = 0
    assert gray[0, 0] == 7


def test_binarize_thresholds_bright_pixels():
    image = make_rect_image()
    mask = ContourExtractor().binarize(image)
    assert mask[50, 30] == 255
    assert mask[0, 0] == 0
    assert set(np.unique(mask)) == {0, 255}


def test_find_blobs_orders_by_area_and_drops_specks():
    frame = make_frame()
    frame[190:192, 190:192] = 255
    extractor = ContourExtractor()
    blobs = extractor.find_blobs(extractor.binarize(frame))

    assert len(blobs) == 2
    assert cv2.contourArea(blobs[0]) > cv2.contourArea(blobs[1])


def test_extracted_silhouette_is_a_closed_outline():
    raster = ContourExtractor().extract_largest(make_rect_image())

    assert raster.shape == (ROWS, COLS)
    assert set(np.unique(raster)) <= {SilhouetteCodes.EXTERIOR, SilhouetteCodes.OUTLINE}
    assert raster[0, 0] == SilhouetteCodes.OUTLINE
    assert raster[64, 32] == SilhouetteCodes.EXTERIOR

    index = SilhouetteIndex.build(raster)
    assert index.valid
    assert index.pixel(0) == (1, 1)
    assert index.pixel(len(index) - 1) == (126, 62)


def test_extract_largest_of_empty_image():
    assert ContourExtractor().extract_largest(np.zeros((ROWS, COLS), dtype=np.uint8)) is None


def test_extract_all_returns_one_raster_per_blob():
    shapes = ContourExtractor().extract_all(make_frame())
    assert len(shapes) == 2
    assert all(s.shape == (ROWS, COLS) for s in shapes)


def test_extract_all_respects_shape_cap():
    extractor = ContourExtractor({'BINARY_THRESHOLD': 127, 'MIN_AREA': 50,
                                  'MAX_SHAPES': 1, 'KERNEL_SIZE': 3})
    assert len(extractor.extract_all(make_frame())) == 1


def test_search_dataset_files(training_dir):
    (training_dir / "notes.txt").write_text("not an image")
    files = search_dataset_files(training_dir)
    assert [f.name for f in files] == ["person_0.png", "person_1.png", "person_2.png"]


def test_search_dataset_files_caps_count(training_dir):
    files = search_dataset_files(training_dir, {'IMAGE_EXTENSIONS': ['.png'], 'MAX_FILES': 2})
    assert len(files) == 2


def test_search_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        search_dataset_files(tmp_path / "missing")


def test_load_image_resizes_to_silhouette(tmp_path):
    path = tmp_path / "big.png"
    cv2.imwrite(str(path), np.zeros((300, 150, 3), dtype=np.uint8))
    assert load_image(path).shape == (ROWS, COLS)


def test_load_image_unreadable(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not a png")
    with pytest.raises(RuntimeError):
        load_image(path)


def test_load_dataset_skips_unreadable(training_dir, capsys):
    broken = training_dir / "broken.png"
    broken.write_bytes(b"not a png")

    images = load_dataset_files(search_dataset_files(training_dir))
    assert len(images) == 3
    assert "Warning" in capsys.readouterr().out
