from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

@dataclass(frozen=True)
class SmoothingConfig:
    params_min_cutoff: float
    params_beta: float
    params_d_cutoff: float

@dataclass(frozen=True)
class SelectionConfig:
    params_min_visibility: float
    params_area_weight: float
    params_foot_weight: float
    params_center_weight: float
    params_confidence_weight: float

@dataclass(frozen=True)
class KinematicsConfig:
    params_min_keypoint_score: float

@dataclass(frozen=True)
class ReleaseConfig:
    params_min_elbow_deg: float
    params_min_wrist_lift: float
    params_lookback: int

@dataclass(frozen=True)
class ScoreRule:
    target: float
    tolerance: float
    policy: str                 # "closer" | "bigger" | "smaller"
    unit: str
    decimals: int
    worst: Optional[float]      # smaller-is-better hard floor; None -> target * worst_multiplier
    worst_multiplier: float

@dataclass(frozen=True)
class ScoreItemConfig:
    key: str                    # label in the result, e.g. "squat"
    feature: str                # ShotFeatures field, e.g. "squat_knee_angle"
    rule: ScoreRule

@dataclass(frozen=True)
class ScoreBucketConfig:
    name: str
    weight: float
    items: Tuple[ScoreItemConfig, ...]

@dataclass(frozen=True)  # re-scoring with a new config means building a new instance
class ScoringConfig:
    params_floor: int
    params_strict: bool
    buckets: Tuple[ScoreBucketConfig, ...]

@dataclass(frozen=True)
class DetectionConfig:
    model_name: str
    params_conf: float
    params_iou: float
    params_imgsz: int
    params_max_det: int

@dataclass(frozen=True)
class ShotAnalysisConfig:
    root_dir: Path
    video_dir: Path
    report_dir: Path
    model_name: str
