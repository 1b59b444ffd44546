import numpy as np
import pytest

from iris_locator import IrisLocator, IrisPair, SearchConfig, locate_irises
from iris_locator.errors import EmptySearchSpace, InvalidRegion
from iris_locator.region import prepare_region, to_grayscale, validate_region
from iris_locator.types import FaceRegion
from iris_locator.window_search import WindowSearch

from .conftest import BLOB_RADIUS, FACE, LEFT_EYE, RIGHT_EYE


def _within_blob(point, center):
    return (
        center[0] - BLOB_RADIUS <= point[0] <= center[0] + BLOB_RADIUS
        and center[1] - BLOB_RADIUS <= point[1] <= center[1] + BLOB_RADIUS
    )


def test_prepare_region_crops_upper_half_without_copy():
    image = np.arange(100 * 80, dtype=np.uint32).reshape(100, 80).astype(np.uint8)
    face = (10, 20, 40, 31)
    upper, crop = prepare_region(image, face)
    assert upper == FaceRegion(10, 20, 40, 15)
    assert crop.shape == (15, 40)
    assert np.shares_memory(crop, image)
    assert np.array_equal(crop, image[20:35, 10:50])


@pytest.mark.parametrize("face", [
    (0, 0, 0, 40),
    (0, 0, 40, -1),
    (-1, 0, 40, 40),
    (0, 0, 101, 40),
    (70, 70, 40, 40),
])
def test_validate_region_rejects_bad_boxes(face):
    with pytest.raises(InvalidRegion):
        validate_region(FaceRegion.from_rect(face), (100, 100))


def test_to_grayscale_converts_colour_and_passes_gray_through():
    gray = np.full((4, 4), 90, dtype=np.uint8)
    assert to_grayscale(gray) is gray

    colour = np.zeros((4, 4, 3), dtype=np.uint8)
    colour[:, :, 2] = 255
    converted = to_grayscale(colour)
    assert converted.shape == (4, 4)
    assert converted.dtype == np.uint8

    assert to_grayscale(np.full((2, 2), 300.0)).max() == 255


def test_to_grayscale_rejects_empty_image():
    with pytest.raises(ValueError):
        to_grayscale(np.zeros((0, 0), dtype=np.uint8))


def test_two_dark_blobs_are_found(two_blob_image):
    pairs = locate_irises(two_blob_image, [FACE])
    assert len(pairs) == 1
    pair = pairs[0]
    assert pair.left is not None and pair.right is not None
    assert _within_blob(pair.left, LEFT_EYE)
    assert _within_blob(pair.right, RIGHT_EYE)


def test_uniform_face_falls_back_to_darkness_ranking():
    image = np.full((200, 200), 128, dtype=np.uint8)
    face = FaceRegion(0, 0, 120, 160)

    upper, _ = prepare_region(image, face)
    windows = WindowSearch().search(image, upper)
    assert windows
    assert all(w.entropy_score == 0.0 for w in windows)

    pair = IrisLocator().locate_irises(image, [face])[0]
    # Equal darkness everywhere: the first window scanned on each side wins.
    assert pair.left == (21, 20)
    assert pair.right == (81, 20)


def test_degenerate_and_tiny_faces_are_omitted(two_blob_image):
    faces = [
        FACE,
        (0, 0, 0, 50),
        (10, 10, 40, -5),
        (150, 150, 100, 100),
        (0, 0, 30, 20),
        (20, 20, 120, 160),
    ]
    locator = IrisLocator()
    pairs = locator.locate_irises(two_blob_image, faces)
    assert len(pairs) == 2
    assert pairs[0] == pairs[1]

    detailed = locator.locate_irises_detailed(two_blob_image, faces)
    assert [pair is None for _, pair in detailed] == [False, True, True, True, True, False]
    assert [face for face, _ in detailed] == faces


def test_locate_face_raises_for_bad_faces(two_blob_image):
    locator = IrisLocator()
    with pytest.raises(InvalidRegion):
        locator.locate_face(two_blob_image, (0, 0, -1, 10))
    with pytest.raises(EmptySearchSpace):
        locator.locate_face(two_blob_image, (0, 0, 30, 20))


def test_results_follow_input_order(noise_image, two_blob_image):
    image = two_blob_image.copy()
    image[150:210, 0:60] = noise_image[:60, :60]
    faces = [FaceRegion(20, 20, 120, 160), FaceRegion(0, 150, 60, 60)]
    locator = IrisLocator()
    pairs = locator.locate_irises(image, faces)
    assert pairs == [locator.locate_face(image, face) for face in faces]

    reversed_pairs = locator.locate_irises(image, list(reversed(faces)))
    assert reversed_pairs == list(reversed(pairs))


def test_locate_irises_is_deterministic_and_leaves_inputs_alone(noise_image):
    original = noise_image.copy()
    faces = [FaceRegion(10, 10, 120, 150), (100, 20, 90, 120)]
    faces_before = list(faces)

    first = locate_irises(noise_image, faces)
    second = locate_irises(noise_image, faces)

    assert first == second
    assert np.array_equal(noise_image, original)
    assert faces == faces_before


def test_accepts_colour_images(two_blob_image):
    colour = np.dstack([two_blob_image] * 3)
    assert locate_irises(colour, [FACE]) == locate_irises(two_blob_image, [FACE])


def test_custom_config_changes_retention():
    image = np.full((200, 200), 128, dtype=np.uint8)
    config = SearchConfig(retained_window_count=1)
    pair = IrisLocator(config).locate_irises(image, [(0, 0, 120, 160)])[0]
    assert pair == IrisPair(left=(21, 20), right=None)


def test_extract_iris_uses_injected_detector(two_blob_image, static_detector):
    detector = static_detector([FACE])
    locator = IrisLocator(face_detector=detector)
    assert locator.extract_iris(two_blob_image) == locate_irises(two_blob_image, [FACE])
    assert detector.calls == 1


def test_extract_iris_requires_detector(two_blob_image):
    with pytest.raises(RuntimeError):
        IrisLocator().extract_iris(two_blob_image)


def test_verbose_reports_skipped_faces(two_blob_image, capsys):
    IrisLocator(verbose=True).locate_irises(two_blob_image, [(0, 0, 0, 0)])
    assert "Skipping face" in capsys.readouterr().err


@pytest.mark.parametrize("rect", [None, (1, 2, 3), "abcd", (0, 0, "wide", 10)])
def test_malformed_face_box_raises_invalid_region(rect):
    with pytest.raises(InvalidRegion):
        FaceRegion.from_rect(rect)


def test_malformed_face_box_only_skips_that_face(two_blob_image):
    faces = [None, FACE, (1, 2, 3)]
    detailed = IrisLocator().locate_irises_detailed(two_blob_image, faces)
    assert [pair is None for _, pair in detailed] == [True, False, True]
    assert locate_irises(two_blob_image, faces) == locate_irises(two_blob_image, [FACE])
