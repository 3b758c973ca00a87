# src/basketballShotCoach/core/signals/smoothing.py
import math
from typing import Dict, Optional, Tuple

from basketballShotCoach.constants import MIN_DT, MIN_CUTOFF_FLOOR
from basketballShotCoach.entity.config_entity import SmoothingConfig
from basketballShotCoach.entity.pose_entity import Keypoint, PersonPose


def smoothing_factor(dt: float, cutoff: float) -> float:
    """
    Exponential smoothing factor for a first order low-pass at `cutoff` Hz.
    a = dt / (dt + 1 / (2*pi*cutoff))
    """
    tau = 1.0 / (2.0 * math.pi * max(cutoff, MIN_CUTOFF_FLOOR))
    return dt / (dt + tau)


def exponential_smoothing(a: float, x: float, x_prev: float) -> float:
    # same as a*x + (1-a)*x_prev, but exact when x == x_prev
    return x_prev + a * (x - x_prev)


class OneEuroFilter:
    """
    One-euro filter for a single scalar signal.
    The cutoff rises with the (smoothed) speed of the signal:
      slow motion -> low cutoff -> heavy smoothing
      fast motion -> high cutoff -> little lag
    """
    def __init__(self, config: SmoothingConfig):
        self.config = config
        self.x_prev: Optional[float] = None
        self.dx_prev = 0.0
        self.t_prev = 0.0

    def __call__(self, x: float, t: float) -> float:
        if self.x_prev is None:
            self.x_prev, self.dx_prev, self.t_prev = x, 0.0, t
            return x

        # non-increasing timestamp: keep the state, return the last value
        if t <= self.t_prev:
            return self.x_prev

        dt = max(t - self.t_prev, MIN_DT)

        # 1. smooth the derivative with the fixed derivative cutoff
        dx = (x - self.x_prev) / dt
        a_d = smoothing_factor(dt, self.config.params_d_cutoff)
        dx_hat = exponential_smoothing(a_d, dx, self.dx_prev)

        # 2. adapt the position cutoff to the speed
        cutoff = self.config.params_min_cutoff + self.config.params_beta * abs(dx_hat)
        a = smoothing_factor(dt, cutoff)
        x_hat = exponential_smoothing(a, x, self.x_prev)

        self.x_prev, self.dx_prev, self.t_prev = x_hat, dx_hat, t
        return x_hat

    @property
    def state(self) -> Optional[Tuple[float, float, float]]:
        """(value, derivative, timestamp) or None before the first sample"""
        if self.x_prev is None:
            return None
        return self.x_prev, self.dx_prev, self.t_prev


class KeypointSmoother:
    """
    Per-session smoothing state: one (x, y) pair of filters per point-id.
    Create one per tracked subject and session, call reset() when a new clip starts.
    """
    def __init__(self, config: SmoothingConfig):
        self.config = config
        self._filters: Dict[str, Tuple[OneEuroFilter, OneEuroFilter]] = {}

    def reset(self) -> None:
        self._filters = {}

    def __len__(self) -> int:
        return len(self._filters)

    def __contains__(self, point_id: str) -> bool:
        return point_id in self._filters

    def update(self, point_id: str, x: float, y: float, t: float) -> Tuple[float, float]:
        pair = self._filters.get(point_id)
        if pair is None:
            pair = (OneEuroFilter(self.config), OneEuroFilter(self.config))
            self._filters[point_id] = pair
        fx, fy = pair
        return fx(x, t), fy(y, t)

    def state(self, point_id: str) -> Optional[Tuple[Tuple[float, float, float], Tuple[float, float, float]]]:
        pair = self._filters.get(point_id)
        if pair is None:
            return None
        return pair[0].state, pair[1].state

    def smooth_pose(self, pose: PersonPose, t: float) -> PersonPose:
        """New PersonPose with every keypoint passed through its own filters; scores are kept."""
        out = {}
        for name, kp in pose.keypoints.items():
            x, y = self.update(name, kp.x, kp.y, t)
            out[name] = Keypoint(name, x, y, kp.score)
        return PersonPose(out, t)
