import math

import numpy as np
import pytest

from config import SilhouetteCodes
from peoplefinder.limb_detection import LimbDetector, halfway_torso
from peoplefinder.models import MISSING, Pixel

from conftest import ROWS, COLS, index_from_raster

BOX_TORSO = Pixel(18, 32)
BOX_WAIST = Pixel(64, 32)


def test_halfway_torso_truncates_toward_torso():
    node, dist = halfway_torso(Pixel(10, 40), Pixel(20, 31))
    assert node == Pixel(15, 36)
    assert dist == pytest.approx(math.hypot(5, 4))


def test_halfway_torso_on_box():
    node, dist = halfway_torso(BOX_TORSO, BOX_WAIST)
    assert node == Pixel(41, 32)
    assert dist == 23.0


def test_halfway_torso_missing_anchor():
    assert halfway_torso(MISSING, BOX_WAIST) == (None, None)
    assert halfway_torso(BOX_TORSO, MISSING) == (None, None)


def test_elbows_on_box(box_index):
    detector = LimbDetector()
    node, dist = halfway_torso(BOX_TORSO, BOX_WAIST)

    left = detector.find_elbow(box_index, BOX_TORSO, Pixel(18, 8), 5, node, dist, 927)
    assert left.pixel == Pixel(41, 8)
    assert left.seed == 2209

    right = detector.find_elbow(box_index, BOX_TORSO, Pixel(18, 55), 5, node, dist, 927)
    assert right.pixel == Pixel(41, 55)
    assert right.seed == 2256


def test_elbows_on_full_silhouette(full_index):
    detector = LimbDetector()
    node, dist = halfway_torso(Pixel(15, 32), Pixel(64, 32))
    assert (node, dist) == (Pixel(39, 32), 24.0)

    left = detector.find_elbow(full_index, Pixel(15, 32), Pixel(15, 6), 6, node, dist, 1023)
    right = detector.find_elbow(full_index, Pixel(15, 32), Pixel(15, 57), 6, node, dist, 1023)
    assert left.pixel == Pixel(39, 6)
    assert right.pixel == Pixel(39, 57)


def test_elbow_without_halfway_point(box_index):
    elbow = LimbDetector().find_elbow(box_index, BOX_TORSO, Pixel(18, 8), 5, None, None, 927)
    assert not elbow.found
    assert elbow.seed == 927


def test_trace_outline_down_the_left_edge(box_index):
    angle = LimbDetector().trace_outline(box_index, Pixel(36, 2), 11.5)
    assert angle == 0.0


def test_trace_outline_along_the_top_edge(box_index):
    angle = LimbDetector().trace_outline(box_index, Pixel(2, 10), 4)
    assert angle == pytest.approx(math.pi / 2)


def test_hands_on_box(box_index):
    detector = LimbDetector()
    _, dist = halfway_torso(BOX_TORSO, BOX_WAIST)

    left = detector.find_hand(box_index, BOX_WAIST, Pixel(41, 8), 5, dist, 927)
    right = detector.find_hand(box_index, BOX_WAIST, Pixel(41, 55), 5, dist, 927)
    assert left.pixel == Pixel(64, 8)
    assert right.pixel == Pixel(64, 55)


def test_hand_needs_an_outline(full_index):
    hand = LimbDetector().find_hand(full_index, Pixel(64, 32), Pixel(39, 6), 6, 24.0, 1023)
    assert not hand.found


def test_hand_with_missing_elbow(box_index):
    hand = LimbDetector().find_hand(box_index, BOX_WAIST, MISSING, 5, 23.0, 927)
    assert not hand.found


def test_closest_pixel_snaps_outside_goal(box_index):
    snapped = LimbDetector().find_closest_pixel(box_index, Pixel(64, 0), 64, 0)
    assert snapped.pixel == Pixel(64, 3)
    assert snapped.seed == (64 - 3) * 58


def test_closest_pixel_keeps_interior_goal(box_index):
    snapped = LimbDetector().find_closest_pixel(box_index, Pixel(30, 30), 64, 0)
    assert snapped.pixel == Pixel(30, 30)


def test_closest_pixel_prefers_later_on_ties():
    raster = np.zeros((ROWS, COLS), dtype=np.uint8)
    raster[10, 10] = SilhouetteCodes.INTERIOR
    raster[10, 14] = SilhouetteCodes.INTERIOR
    index = index_from_raster(raster)

    snapped = LimbDetector().find_closest_pixel(index, Pixel(10, 12), 20, 0)
    assert snapped.pixel == Pixel(10, 14)
    assert snapped.seed == 1


def test_closest_pixel_with_no_candidates(box_index):
    snapped = LimbDetector().find_closest_pixel(box_index, Pixel(64, 32), 64, len(box_index))
    assert not snapped.found
    snapped = LimbDetector().find_closest_pixel(box_index, Pixel(64, 32), 1, 0)
    assert not snapped.found


def test_limb_seeds_never_move_backwards(box_index):
    detector = LimbDetector()
    node, dist = halfway_torso(BOX_TORSO, BOX_WAIST)
    shoulder_seed = 927

    for shoulder in (Pixel(18, 8), Pixel(18, 55)):
        elbow = detector.find_elbow(box_index, BOX_TORSO, shoulder, 5, node, dist, shoulder_seed)
        assert elbow.seed >= shoulder_seed

        hand = detector.find_hand(box_index, BOX_WAIST, elbow.pixel, 5, dist, shoulder_seed)
        assert hand.seed >= shoulder_seed

    snapped = detector.find_closest_pixel(box_index, Pixel(3, 3), 64, 500)
    assert snapped.seed >= 500
    assert snapped.pixel.row >= box_index.pixel(500).row
