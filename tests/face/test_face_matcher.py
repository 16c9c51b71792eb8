import math

from src.hr_attendance.hr_attendance.face.matcher import NO_MATCH_DISTANCE, descriptor_distance, is_match


def test_distance_to_self_is_zero():
    v = [0.05 * i for i in range(128)]

    assert descriptor_distance(v, v) == 0.0


def test_distance_is_symmetric():
    a = [0.1] * 128
    b = [0.1] * 127 + [0.9]

    assert descriptor_distance(a, b) == descriptor_distance(b, a)
    assert math.isclose(descriptor_distance(a, b), 0.8)


def test_missing_or_mismatched_descriptors_never_match():
    v = [0.1] * 128

    assert descriptor_distance(None, v) == NO_MATCH_DISTANCE
    assert descriptor_distance(v, None) == NO_MATCH_DISTANCE
    assert descriptor_distance([], []) == NO_MATCH_DISTANCE
    assert descriptor_distance(v, v[:64]) == NO_MATCH_DISTANCE
    assert not is_match(descriptor_distance(v, v[:64]))


def test_threshold_is_strict():
    assert is_match(0.59, 0.6)
    assert not is_match(0.6, 0.6)
    assert not is_match(0.8, 0.6)
