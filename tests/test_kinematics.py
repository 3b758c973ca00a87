import pytest

from basketballShotCoach.core.pose.kinematics import (
    angle3, line_difference, compute_angles, alignment_angle, lateral_offset,
    body_scale, body_width, pick_side, knee_flexion,
)
from basketballShotCoach.entity.pose_entity import Keypoint


def K(x, y, s=0.9, name="p"):
    return Keypoint(name, x, y, s)


def test_right_angle():
    assert angle3(K(0, 10), K(0, 0), K(10, 0)) == pytest.approx(90.0)


@pytest.mark.parametrize("a,b,c", [
    ((3, 7), (1, 1), (9, -2)),
    ((0, 5), (0, 0), (5, 5)),
    ((-4, 1), (2, 2), (8, 3)),
])
def test_angle_is_symmetric(a, b, c):
    assert angle3(K(*a), K(*b), K(*c)) == pytest.approx(angle3(K(*c), K(*b), K(*a)))


def test_collinear_points_are_clamp_safe():
    assert angle3(K(0, 0), K(1, 1), K(2, 2)) == pytest.approx(180.0)
    assert angle3(K(2, 2), K(1, 1), K(3, 3)) == pytest.approx(0.0, abs=1e-3)


def test_coincident_points_are_omitted():
    assert angle3(K(1, 1), K(1, 1), K(1, 1)) is None
    assert angle3(K(0, 0), K(1, 1), K(1, 1)) is None


def test_missing_or_low_confidence_points_are_omitted():
    assert angle3(None, K(0, 0), K(1, 0)) is None
    assert angle3(K(0, 1), K(0, 0, 0.1), K(1, 0)) is None
    # default threshold is inclusive
    assert angle3(K(0, 1), K(0, 0, 0.15), K(1, 0)) == pytest.approx(90.0)
    # unscored points count as visible
    assert angle3(K(0, 1, None), K(0, 0, None), K(1, 0, None)) == pytest.approx(90.0)


def test_line_difference_wraps_undirected_lines():
    assert line_difference(10.0, 190.0) == pytest.approx(0.0)
    assert line_difference(-5.0, 175.0) == pytest.approx(0.0)
    assert line_difference(0.0, 100.0) == pytest.approx(80.0)
    assert line_difference(None, 3.0) is None


def test_compute_angles_standing(make_pose, standing):
    a = compute_angles(make_pose(standing))
    assert a.knee_l == pytest.approx(180.0)
    assert a.knee_r == pytest.approx(180.0)
    assert a.elbow_r == pytest.approx(180.0 - 12.5, abs=1.0)
    # no hand / foot tips in this pose
    assert a.wrist_r is None
    assert a.ankle_l is None


def test_missing_keypoint_omits_only_that_feature(make_pose, standing):
    del standing["left_ankle"]
    a = compute_angles(make_pose(standing))
    assert a.knee_l is None
    assert a.knee_r is not None
    assert a.hip_l is not None


def test_ankle_angle_falls_back_to_heel(make_pose, standing):
    standing["right_heel"] = (365, 1010)
    a = compute_angles(make_pose(standing))
    assert a.ankle_r is not None
    standing["right_foot_index"] = (420, 1010)
    b = compute_angles(make_pose(standing))
    assert b.ankle_r != a.ankle_r


def test_compute_angles_of_nobody_is_all_unknown():
    a = compute_angles(None)
    assert all(v is None for v in vars(a).values())


def test_alignment_angle(make_pose, standing):
    assert alignment_angle(make_pose(standing)) == pytest.approx(0.0)
    # rotate the hip line by ~45 deg
    standing["left_hip"] = (335, 625)
    standing["right_hip"] = (385, 575)
    assert alignment_angle(make_pose(standing)) == pytest.approx(45.0)


def test_lateral_offset_is_resolution_independent(make_pose, standing):
    standing["left_hip"] = (365, 600)
    standing["right_hip"] = (415, 600)
    small = lateral_offset(make_pose(standing))
    big = lateral_offset(make_pose({n: (2 * x, 2 * y) for n, (x, y) in standing.items()}))
    assert small == pytest.approx(big)
    # hip mid x=390, ankle mid x=360, hip-to-nose distance ~301.5
    assert small == pytest.approx(30 / body_scale(make_pose(standing)))


def test_body_scale_falls_back_to_ankles(make_pose, standing):
    del standing["nose"]
    assert body_scale(make_pose(standing)) == pytest.approx(400.0)


def test_body_width_prefers_shoulders(make_pose, standing):
    assert body_width(make_pose(standing)) == pytest.approx(80.0)
    del standing["left_shoulder"]
    assert body_width(make_pose(standing)) == pytest.approx(50.0)


def test_pick_side_prefers_confident_side_and_never_averages(make_pose, standing):
    pts = {n: (p[0], p[1], 0.5 if n.startswith("right") else 0.9) for n, p in standing.items()}
    # bend the left knee only
    pts["left_knee"] = (385, 800, 0.9)
    pose = make_pose(pts)
    angles = compute_angles(pose)
    side = pick_side(pose, angles, "knee", ("hip", "knee", "ankle"))
    assert side == "left"
    assert knee_flexion(pose) == pytest.approx(angles.knee_l)
    assert knee_flexion(pose) != pytest.approx((angles.knee_l + angles.knee_r) / 2)


def test_knee_flexion_falls_back_to_other_side(make_pose, standing):
    del standing["right_ankle"]
    standing["left_knee"] = (375, 800)
    pose = make_pose(standing)
    assert knee_flexion(pose) == pytest.approx(compute_angles(pose).knee_l)
