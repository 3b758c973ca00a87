from __future__ import annotations
from typing import List, Optional, Sequence, Tuple

from basketballShotCoach.core.pose.kinematics import (
    compute_angles, alignment_angle, lateral_offset,
)
from basketballShotCoach.components.release.release_detector import ReleaseDetector, mean_side_confidence
from basketballShotCoach.constants import SIDES
from basketballShotCoach.entity.feature_entity import ShotFeatures, ClipStability
from basketballShotCoach.entity.pose_entity import PoseSample

LEG_PARTS = ("hip", "knee", "ankle")


def _series(samples: Sequence[PoseSample], fn) -> List[Tuple[float, float]]:
    """(timestamp, value) for every sample where fn(pose) is measurable."""
    out = []
    for s in samples:
        v = fn(s.pose) if s.pose is not None else None
        if v is not None:
            out.append((s.timestamp, v))
    return out


def knee_side(samples: Sequence[PoseSample], min_score: float) -> Optional[str]:
    """
    Leg read for the whole clip: the one with the higher mean hip/knee/ankle confidence,
    the other only when the preferred knee is never measurable. Right wins a tie.
    """
    # stable sort keeps SIDES order on equal confidence
    ranked = sorted(SIDES, key=lambda side: -mean_side_confidence(samples, side, LEG_PARTS))
    for side in ranked:
        if any(compute_angles(s.pose, min_score).side("knee", side) is not None
               for s in samples if s.pose is not None):
            return side
    return None


def peak_extension_speed(series: List[Tuple[float, float]]) -> Optional[float]:
    """Largest increase rate (deg/s) between consecutive measurements; 0 when the angle never opens."""
    if len(series) < 2:
        return None
    best = 0.0
    for (t0, a0), (t1, a1) in zip(series, series[1:]):
        dt = t1 - t0
        if dt <= 0:
            continue
        best = max(best, (a1 - a0) / dt)
    return best


def follow_through(samples: Sequence[PoseSample], release: int, detector: ReleaseDetector,
                   side: str) -> Optional[float]:
    """Seconds the shooting elbow stays extended after the release frame."""
    start = samples[release].timestamp
    last = start
    for s in samples[release + 1:]:
        if s.pose is None:
            continue
        elbow = detector.elbow_angle(s, side)
        if elbow is None:
            continue
        if elbow < detector.config.params_min_elbow_deg:
            break
        last = s.timestamp
    return last - start


class ShotFeatureBuilder:
    """Turns a smoothed clip (+ release frame, + stability) into the scored feature vector."""
    def __init__(self, detector: ReleaseDetector):
        self.detector = detector
        self.min_score = detector.min_score

    def build(self, samples: Sequence[PoseSample], release: Optional[int], side: str,
              stability: ClipStability) -> ShotFeatures:
        ms = self.min_score
        # lower body is read on the loading phase, up to the release when known
        loading = samples[: release + 1] if release is not None else samples
        leg = knee_side(loading, ms)
        knees = [] if leg is None else _series(loading, lambda p: compute_angles(p, ms).side("knee", leg))

        release_angle = arm_power = follow = None
        align = None
        if release is not None:
            rs = samples[release]
            release_angle = self.detector.elbow_angle(rs, side)
            wrist = compute_angles(rs.pose, ms).side("wrist", side)
            if wrist is not None:
                arm_power = 180.0 - wrist
            follow = follow_through(samples, release, self.detector, side)
            align = alignment_angle(rs.pose, ms)
        if align is None:
            # no release (or not measurable there): last frame that has it
            aligns = _series(samples, lambda p: alignment_angle(p, ms))
            align = aligns[-1][1] if aligns else None

        sway = _series(samples, lambda p: lateral_offset(p, ms))

        return ShotFeatures(
            squat_knee_angle=min(a for _, a in knees) if knees else None,
            knee_ext_speed=peak_extension_speed(knees),
            release_angle=release_angle,
            arm_power_angle=arm_power,
            follow_duration=follow,
            elbow_tightness=stability.elbow_path_compactness,
            sway_percent=max(v for _, v in sway) if sway else None,
            align_angle=align,
            com_variance=stability.com_variance,
            final_alignment=stability.final_alignment,
        )
