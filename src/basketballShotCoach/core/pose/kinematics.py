from __future__ import annotations
import math
from typing import Optional, Tuple, Iterable

import numpy as np

from basketballShotCoach.constants import (
    DEFAULT_MIN_KEYPOINT_SCORE, SIDES, NOSE, L_SH, R_SH, L_HIP, R_HIP, L_ANK, R_ANK,
    HAND_TIP_ORDER, FOOT_TIP_ORDER, side_name,
)
from basketballShotCoach.entity.pose_entity import Keypoint, PersonPose
from basketballShotCoach.entity.feature_entity import JointAngles


def _usable(kp: Optional[Keypoint], min_score: float) -> bool:
    return kp is not None and kp.visible(min_score)


def angle3(a: Optional[Keypoint], b: Optional[Keypoint], c: Optional[Keypoint],
           min_score: float = DEFAULT_MIN_KEYPOINT_SCORE) -> Optional[float]:
    """
    Angle at vertex b between b->a and b->c, in degrees [0, 180].
    Returns None if a point is missing, below min_score, or coincides with b.
    """
    if not (_usable(a, min_score) and _usable(b, min_score) and _usable(c, min_score)):
        return None
    ba = np.array([a.x - b.x, a.y - b.y], dtype=np.float64)
    bc = np.array([c.x - b.x, c.y - b.y], dtype=np.float64)
    n_ba = np.linalg.norm(ba)
    n_bc = np.linalg.norm(bc)
    if n_ba == 0 or n_bc == 0:
        return None
    cos = np.clip(np.dot(ba, bc) / (n_ba * n_bc), -1.0, 1.0)
    return float(np.degrees(np.arccos(cos)))


def line_angle(a: Optional[Keypoint], b: Optional[Keypoint],
               min_score: float = DEFAULT_MIN_KEYPOINT_SCORE) -> Optional[float]:
    """Direction of the segment a->b against the image x axis, degrees in (-180, 180]."""
    if not (_usable(a, min_score) and _usable(b, min_score)):
        return None
    dx, dy = b.x - a.x, b.y - a.y
    if dx == 0 and dy == 0:
        return None
    return math.degrees(math.atan2(dy, dx))


def line_difference(a_deg: Optional[float], b_deg: Optional[float]) -> Optional[float]:
    """Smallest angle between two undirected lines, degrees in [0, 90]."""
    if a_deg is None or b_deg is None:
        return None
    d = abs(a_deg - b_deg) % 180.0
    return min(d, 180.0 - d)


def midpoint(a: Optional[Keypoint], b: Optional[Keypoint],
             min_score: float = DEFAULT_MIN_KEYPOINT_SCORE) -> Optional[Tuple[float, float]]:
    if not (_usable(a, min_score) and _usable(b, min_score)):
        return None
    return (a.x + b.x) / 2.0, (a.y + b.y) / 2.0


def distance(p: Optional[Tuple[float, float]], q: Optional[Tuple[float, float]]) -> Optional[float]:
    if p is None or q is None:
        return None
    return math.hypot(p[0] - q[0], p[1] - q[1])


def first_present(pose: PersonPose, names: Iterable[str]) -> Optional[Keypoint]:
    for n in names:
        kp = pose.get(n)
        if kp is not None:
            return kp
    return None


def hand_tip(pose: PersonPose, side: str) -> Optional[Keypoint]:
    return first_present(pose, [side_name(side, p) for p in HAND_TIP_ORDER])


def foot_tip(pose: PersonPose, side: str) -> Optional[Keypoint]:
    return first_present(pose, [side_name(side, p) for p in FOOT_TIP_ORDER])


def compute_angles(pose: Optional[PersonPose],
                   min_score: float = DEFAULT_MIN_KEYPOINT_SCORE) -> JointAngles:
    """Common joint angles of one frame. Each one is None when it can't be measured."""
    if pose is None:
        return JointAngles()

    def ang(side: str, a: str, b: str, c) -> Optional[float]:
        kc = c if isinstance(c, Keypoint) or c is None else pose.get(side_name(side, c))
        return angle3(pose.get(side_name(side, a)), pose.get(side_name(side, b)), kc, min_score)

    vals = {}
    for side in SIDES:
        s = side[0]
        vals[f"knee_{s}"] = ang(side, "hip", "knee", "ankle")
        vals[f"hip_{s}"] = ang(side, "shoulder", "hip", "knee")
        vals[f"elbow_{s}"] = ang(side, "shoulder", "elbow", "wrist")
        vals[f"shoulder_{s}"] = ang(side, "elbow", "shoulder", "hip")
        vals[f"ankle_{s}"] = ang(side, "knee", "ankle", foot_tip(pose, side))
        vals[f"wrist_{s}"] = ang(side, "elbow", "wrist", hand_tip(pose, side))
    return JointAngles(**vals)


def side_confidence(pose: Optional[PersonPose], side: str, parts: Iterable[str]) -> float:
    """Mean score of the named parts on one side. Missing points count as 0, unscored as 1."""
    if pose is None:
        return 0.0
    total, n = 0.0, 0
    for p in parts:
        kp = pose.get(side_name(side, p))
        n += 1
        if kp is not None:
            total += 1.0 if kp.score is None else kp.score
    return total / n if n else 0.0


def pick_side(pose: Optional[PersonPose], angles: JointAngles, joint: str,
              parts: Iterable[str]) -> Optional[str]:
    """
    Side whose `joint` angle is usable, preferring the more confident side.
    Never averages the two sides. Right wins an exact tie.
    """
    parts = tuple(parts)
    usable = [s for s in SIDES if angles.side(joint, s) is not None]
    if not usable:
        return None
    return max(usable, key=lambda s: side_confidence(pose, s, parts))


def knee_flexion(pose: Optional[PersonPose], min_score: float = DEFAULT_MIN_KEYPOINT_SCORE) -> Optional[float]:
    angles = compute_angles(pose, min_score)
    side = pick_side(pose, angles, "knee", ("hip", "knee", "ankle"))
    return None if side is None else angles.side("knee", side)


def alignment_angle(pose: Optional[PersonPose], min_score: float = DEFAULT_MIN_KEYPOINT_SCORE) -> Optional[float]:
    """Torso-vs-foot alignment: angle between the hip line and the ankle line, degrees [0, 90]."""
    if pose is None:
        return None
    hip = line_angle(pose.get(L_HIP), pose.get(R_HIP), min_score)
    ankle = line_angle(pose.get(L_ANK), pose.get(R_ANK), min_score)
    return line_difference(hip, ankle)


def body_scale(pose: Optional[PersonPose], min_score: float = DEFAULT_MIN_KEYPOINT_SCORE) -> Optional[float]:
    """Hip-mid to nose distance, falling back to the hip-mid to ankle-mid span."""
    if pose is None:
        return None
    hip = midpoint(pose.get(L_HIP), pose.get(R_HIP), min_score)
    if hip is None:
        return None
    nose = pose.get(NOSE)
    scale = distance(hip, (nose.x, nose.y)) if _usable(nose, min_score) else None
    if not scale:
        scale = distance(hip, midpoint(pose.get(L_ANK), pose.get(R_ANK), min_score))
    return scale or None


def body_width(pose: Optional[PersonPose], min_score: float = DEFAULT_MIN_KEYPOINT_SCORE) -> Optional[float]:
    """Horizontal shoulder width, falling back to hip width."""
    if pose is None:
        return None
    for a, b in ((L_SH, R_SH), (L_HIP, R_HIP)):
        ka, kb = pose.get(a), pose.get(b)
        if _usable(ka, min_score) and _usable(kb, min_score):
            w = abs(ka.x - kb.x)
            if w > 0:
                return w
    return None


def lateral_offset(pose: Optional[PersonPose], min_score: float = DEFAULT_MIN_KEYPOINT_SCORE) -> Optional[float]:
    """
    Horizontal distance of the hip midpoint (centre of mass proxy) from the ankle
    midpoint (base of support), as a fraction of body_scale. 0.2868 reads as 28.68%.
    """
    if pose is None:
        return None
    hip = midpoint(pose.get(L_HIP), pose.get(R_HIP), min_score)
    ankle = midpoint(pose.get(L_ANK), pose.get(R_ANK), min_score)
    scale = body_scale(pose, min_score)
    if hip is None or ankle is None or scale is None:
        return None
    return abs(hip[0] - ankle[0]) / scale
