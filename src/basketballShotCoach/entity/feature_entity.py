from __future__ import annotations
from dataclasses import dataclass, asdict, fields
from typing import Dict, List, Optional, Any


@dataclass(frozen=True)
class JointAngles:
    """
    Joint angles of one frame in degrees, vertex named by the field.
    None means the angle could not be measured (missing / low-confidence point),
    not that it was bad.
    """
    knee_l: Optional[float] = None
    knee_r: Optional[float] = None
    hip_l: Optional[float] = None
    hip_r: Optional[float] = None
    elbow_l: Optional[float] = None
    elbow_r: Optional[float] = None
    shoulder_l: Optional[float] = None
    shoulder_r: Optional[float] = None
    ankle_l: Optional[float] = None
    ankle_r: Optional[float] = None
    wrist_l: Optional[float] = None
    wrist_r: Optional[float] = None

    def side(self, joint: str, side: str) -> Optional[float]:
        """angles.side("knee", "left") -> knee_l"""
        return getattr(self, f"{joint}_{side[0]}")


@dataclass(frozen=True)
class ClipStability:
    """Clip-wide balance measures, all normalized by body width."""
    elbow_path_compactness: Optional[float] = None
    com_variance: Optional[float] = None
    final_alignment: Optional[float] = None


@dataclass(frozen=True)
class ShotFeatures:
    # lower body
    squat_knee_angle: Optional[float] = None   # deg
    knee_ext_speed: Optional[float] = None     # deg/s
    # upper body
    release_angle: Optional[float] = None      # deg
    arm_power_angle: Optional[float] = None    # deg
    follow_duration: Optional[float] = None    # s
    elbow_tightness: Optional[float] = None    # fraction of body width
    # balance
    sway_percent: Optional[float] = None       # fraction of body scale
    align_angle: Optional[float] = None        # deg
    com_variance: Optional[float] = None
    final_alignment: Optional[float] = None

    @classmethod
    def names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def value(self, name: str) -> Optional[float]:
        return getattr(self, name)

    def to_dict(self) -> Dict[str, Optional[float]]:
        return asdict(self)


@dataclass(frozen=True)
class SubScore:
    score: int
    value: str                  # formatted, e.g. "172.48度" or "未检测"
    unit: str
    raw: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "value": self.value}


@dataclass(frozen=True)
class BucketScore:
    name: str
    score: int
    items: Dict[str, SubScore]

    def __getitem__(self, key: str) -> SubScore:
        return self.items[key]

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"score": self.score}
        for key, item in self.items.items():
            out[key] = item.to_dict()
        return out


@dataclass(frozen=True)
class ScoreResult:
    total: int
    buckets: Dict[str, BucketScore]

    def __getitem__(self, name: str) -> BucketScore:
        return self.buckets[name]

    def to_dict(self) -> Dict[str, Any]:
        """{total, lower: {score, squat: {score, value}, ...}, upper: {...}, balance: {...}}"""
        out: Dict[str, Any] = {"total": self.total}
        for name, bucket in self.buckets.items():
            out[name] = bucket.to_dict()
        return out


@dataclass(frozen=True)
class ShotAnalysis:
    """What finishing one clip produces."""
    features: ShotFeatures
    stability: ClipStability
    release_index: Optional[int]
    release_timestamp: Optional[float]
    score: ScoreResult
    n_samples: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_samples": self.n_samples,
            "release": {"index": self.release_index, "timestamp": self.release_timestamp},
            "features": self.features.to_dict(),
            "stability": asdict(self.stability),
            "score": self.score.to_dict(),
        }


@dataclass(frozen=True)
class FrameAnalysis:
    """Live per-frame output: the smoothed primary pose and its instantaneous measures."""
    timestamp: float
    pose: Optional[Any]                 # PersonPose, None when nobody was selected
    angles: JointAngles
    lateral_offset: Optional[float] = None
    alignment_angle: Optional[float] = None
