import math

import pytest

from basketballShotCoach.config.configuration import (
    build_smoothing_config, build_selection_config, build_kinematics_config,
    build_release_config, build_scoring_config,
)
from basketballShotCoach.entity.pose_entity import Keypoint, PersonPose, MultiPersonFrame


def pose_from(points, score=0.9, ts=0.0):
    """{"right_wrist": (x, y), ...} or (x, y, score) -> PersonPose"""
    kps = []
    for name, p in points.items():
        s = p[2] if len(p) > 2 else score
        kps.append(Keypoint(name, float(p[0]), float(p[1]), s))
    return PersonPose.from_keypoints(kps, ts)


# standing shooter, ~720x1280 portrait frame, centred at x=360
STANDING = {
    "nose": (360, 300),
    "left_shoulder": (320, 380), "right_shoulder": (400, 380),
    "left_elbow": (300, 470), "right_elbow": (420, 470),
    "left_wrist": (300, 560), "right_wrist": (420, 560),
    "left_hip": (335, 600), "right_hip": (385, 600),
    "left_knee": (335, 800), "right_knee": (385, 800),
    "left_ankle": (335, 1000), "right_ankle": (385, 1000),
}


def arm_pose(elbow_deg, wrist_y, side="right", elbow_x=420.0, score=0.9, extra=None, ts=0.0):
    """Standing body with one arm raised: wrist straight above the elbow, shoulder placed so
    the elbow angle is exactly elbow_deg."""
    pts = {n: p for n, p in STANDING.items() if "elbow" not in n and "wrist" not in n and "shoulder" not in n}
    ex, ey = elbow_x, wrist_y + 50.0
    th = math.radians(elbow_deg)
    pts[f"{side}_elbow"] = (ex, ey, score)
    pts[f"{side}_wrist"] = (ex, wrist_y, score)
    pts[f"{side}_shoulder"] = (ex + 60.0 * math.sin(th), ey - 60.0 * math.cos(th), score)
    pts.update(extra or {})
    return pose_from(pts, ts=ts)


@pytest.fixture
def make_pose():
    return pose_from


@pytest.fixture
def make_arm():
    return arm_pose


@pytest.fixture
def standing():
    return dict(STANDING)


@pytest.fixture
def make_frame():
    def _make(persons, ts=0.0, width=720, height=1280):
        return MultiPersonFrame(ts, width, height, list(persons))
    return _make


@pytest.fixture
def smoothing_config():
    return build_smoothing_config()


@pytest.fixture
def selection_config():
    return build_selection_config()


@pytest.fixture
def kinematics_config():
    return build_kinematics_config()


@pytest.fixture
def release_config():
    return build_release_config()


@pytest.fixture
def scoring_config():
    return build_scoring_config()
