from __future__ import annotations
from typing import List, Optional, Sequence

import numpy as np

from basketballShotCoach import logger
from basketballShotCoach.constants import SIDES, L_HIP, R_HIP, L_ANK, R_ANK, side_name
from basketballShotCoach.core.pose.kinematics import angle3, side_confidence, body_width, midpoint
from basketballShotCoach.entity.config_entity import ReleaseConfig, KinematicsConfig
from basketballShotCoach.entity.feature_entity import ClipStability
from basketballShotCoach.entity.pose_entity import PoseSample

ARM_PARTS = ("shoulder", "elbow", "wrist")
MIN_USABLE_SAMPLES = 3


def usable_count(samples: Sequence[PoseSample]) -> int:
    return sum(1 for s in samples if s.pose is not None)


def mean_side_confidence(samples: Sequence[PoseSample], side: str, parts: Sequence[str]) -> float:
    if not samples:
        return 0.0
    return float(np.mean([side_confidence(s.pose, side, parts) for s in samples]))


def shooting_side(samples: Sequence[PoseSample]) -> str:
    """
    Side whose arm (shoulder, elbow, wrist) was seen most confidently over the clip.
    Decided once per clip so every frame measures the same arm. Right wins a tie.
    """
    best, best_conf = SIDES[0], -1.0
    for side in SIDES:
        conf = mean_side_confidence(samples, side, ARM_PARTS)
        if conf > best_conf:
            best, best_conf = side, conf
    return best


class ReleaseDetector:
    """
    Finds the shot release in a smoothed, time-ordered clip:
    the first frame where the shooting elbow is (nearly) straight AND the wrist
    has risen by at least min_wrist_lift px against one of the previous
    `lookback` frames. Image y grows downward, so rising = y decreasing.
    """
    def __init__(self, config: ReleaseConfig, kinematics: KinematicsConfig):
        self.config = config
        self.min_score = kinematics.params_min_keypoint_score

    def _arm(self, sample: PoseSample, side: str):
        pose = sample.pose
        if pose is None:
            return None, None, None
        return tuple(pose.get(side_name(side, p)) for p in ARM_PARTS)

    def elbow_angle(self, sample: PoseSample, side: str) -> Optional[float]:
        sh, el, wr = self._arm(sample, side)
        return angle3(sh, el, wr, self.min_score)

    def wrist_y(self, sample: PoseSample, side: str) -> Optional[float]:
        wr = self._arm(sample, side)[2]
        if wr is None or not wr.visible(self.min_score):
            return None
        return wr.y

    def detect(self, samples: Sequence[PoseSample], side: Optional[str] = None) -> Optional[int]:
        """Index of the release frame in `samples`, or None (no guessing)."""
        if usable_count(samples) < MIN_USABLE_SAMPLES:
            logger.info(f"release: only {usable_count(samples)} usable samples, skip detection")
            return None
        side = side or shooting_side(samples)
        lookback = max(int(self.config.params_lookback), 1)

        for i in range(lookback, len(samples)):
            cur = samples[i]
            if cur.pose is None:
                continue

            # 1) arm (nearly) straight
            elbow = self.elbow_angle(cur, side)
            if elbow is None or elbow < self.config.params_min_elbow_deg:
                continue
            cur_y = self.wrist_y(cur, side)
            if cur_y is None:
                continue

            # 2) wrist went up against at least one recent frame
            lifted = False
            for b in range(1, lookback + 1):
                prev_y = self.wrist_y(samples[i - b], side)
                if prev_y is None:
                    continue
                if prev_y - cur_y >= self.config.params_min_wrist_lift:
                    lifted = True
                    break
            if not lifted:
                continue

            logger.info(f"release: frame {i} (t={cur.timestamp:.3f}s, elbow={elbow:.1f}, side={side})")
            return i

        logger.info("release: no frame satisfied elbow extension + wrist lift")
        return None

    def clip_stability(self, samples: Sequence[PoseSample], side: Optional[str] = None) -> ClipStability:
        """
        Balance measures over the whole clip (release frame not needed):
          elbow_path_compactness  horizontal span of the shooting elbow x
          com_variance            variance of the hip-midpoint x
          final_alignment         |hip-mid x - ankle-mid x| on the last frame having both
        all in units of the clip's median body width.
        """
        side = side or shooting_side(samples)
        poses = [s.pose for s in samples if s.pose is not None]
        widths = [w for w in (body_width(p, self.min_score) for p in poses) if w is not None]
        if not widths:
            return ClipStability()
        width = float(np.median(widths))

        elbow_xs: List[float] = []
        hip_xs: List[float] = []
        final_alignment = None
        for pose in poses:
            el = pose.get(side_name(side, "elbow"))
            if el is not None and el.visible(self.min_score):
                elbow_xs.append(el.x)
            hip = midpoint(pose.get(L_HIP), pose.get(R_HIP), self.min_score)
            if hip is None:
                continue
            hip_xs.append(hip[0])
            ankle = midpoint(pose.get(L_ANK), pose.get(R_ANK), self.min_score)
            if ankle is not None:
                final_alignment = abs(hip[0] - ankle[0]) / width

        compact = (max(elbow_xs) - min(elbow_xs)) / width if len(elbow_xs) >= 2 else None
        com_var = float(np.var(np.asarray(hip_xs) / width)) if len(hip_xs) >= 2 else None
        return ClipStability(
            elbow_path_compactness=compact,
            com_variance=com_var,
            final_alignment=final_alignment,
        )
