from typing import Any, Mapping, Optional

from basketballShotCoach import logger
from basketballShotCoach.constants import *
from basketballShotCoach.utils.common import *
from basketballShotCoach.entity.config_entity import *

REQUIRED_ITEM_FIELDS = ("key", "feature", "target", "policy")


def _section(params: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return params if params is not None else {}


def build_smoothing_config(params: Optional[Mapping[str, Any]] = None) -> SmoothingConfig:
    p = _section(params)
    return SmoothingConfig(
        params_min_cutoff=float(p.get("min_cutoff", DEFAULT_MIN_CUTOFF)),
        params_beta=float(p.get("beta", DEFAULT_BETA)),
        params_d_cutoff=float(p.get("d_cutoff", DEFAULT_D_CUTOFF)),
    )


def build_selection_config(params: Optional[Mapping[str, Any]] = None) -> SelectionConfig:
    p = _section(params)
    return SelectionConfig(
        params_min_visibility=float(p.get("min_visibility", DEFAULT_MIN_VISIBILITY)),
        params_area_weight=float(p.get("area_weight", DEFAULT_AREA_WEIGHT)),
        params_foot_weight=float(p.get("foot_weight", DEFAULT_FOOT_WEIGHT)),
        params_center_weight=float(p.get("center_weight", DEFAULT_CENTER_WEIGHT)),
        params_confidence_weight=float(p.get("confidence_weight", DEFAULT_CONFIDENCE_WEIGHT)),
    )


def build_kinematics_config(params: Optional[Mapping[str, Any]] = None) -> KinematicsConfig:
    p = _section(params)
    return KinematicsConfig(
        params_min_keypoint_score=float(p.get("min_keypoint_score", DEFAULT_MIN_KEYPOINT_SCORE)),
    )


def build_release_config(params: Optional[Mapping[str, Any]] = None) -> ReleaseConfig:
    p = _section(params)
    return ReleaseConfig(
        params_min_elbow_deg=float(p.get("min_elbow_deg", DEFAULT_MIN_ELBOW_DEG)),
        params_min_wrist_lift=float(p.get("min_wrist_lift", DEFAULT_MIN_WRIST_LIFT)),
        params_lookback=int(p.get("lookback", DEFAULT_LOOKBACK)),
    )


def build_score_rule(item: Mapping[str, Any]) -> ScoreRule:
    worst = item.get("worst")
    return ScoreRule(
        target=float(item["target"]),
        tolerance=float(item.get("tolerance") or 0.0),   # floored where it divides
        policy=POLICY_ALIASES[str(item["policy"])],
        unit=str(item.get("unit", "")),
        decimals=int(item.get("decimals", 2)),
        worst=None if worst is None else float(worst),
        worst_multiplier=float(item.get("worst_multiplier", DEFAULT_WORST_MULTIPLIER)),
    )


def _item_problem(item: Mapping[str, Any]) -> Optional[str]:
    missing = [f for f in REQUIRED_ITEM_FIELDS if item.get(f) is None]
    if missing:
        return f"missing {', '.join(missing)}"
    if str(item["policy"]) not in POLICY_ALIASES:
        return f"unknown policy {item['policy']!r}"
    return None


def build_scoring_config(params: Optional[Mapping[str, Any]] = None) -> ScoringConfig:
    """
    Buckets/items come from params["buckets"] when given, else the built-in rules.
    A malformed item raises ValueError with strict=True, otherwise it is logged and dropped.
    """
    p = _section(params)
    strict = bool(p.get("strict", True))
    raw_buckets = p.get("buckets")
    if raw_buckets is None:
        raw_buckets = DEFAULT_SCORING_BUCKETS

    buckets = []
    for b in raw_buckets:
        name = str(b.get("name", f"bucket_{len(buckets)}"))
        items = []
        for it in b.get("items", []) or []:
            problem = _item_problem(it)
            if problem is not None:
                msg = f"scoring rule {name}.{it.get('key')}: {problem}"
                if strict:
                    raise ValueError(msg)
                logger.warning(msg + " (skipped)")
                continue
            items.append(ScoreItemConfig(key=str(it["key"]), feature=str(it["feature"]), rule=build_score_rule(it)))
        buckets.append(ScoreBucketConfig(
            name=name,
            weight=float(b.get("weight", DEFAULT_BUCKET_WEIGHT)),
            items=tuple(items),
        ))

    return ScoringConfig(
        params_floor=int(p.get("floor", DEFAULT_FLOOR)),
        params_strict=strict,
        buckets=tuple(buckets),
    )


def build_detection_config(model_name: str, params: Optional[Mapping[str, Any]] = None) -> DetectionConfig:
    p = _section(params)
    return DetectionConfig(
        model_name=model_name,
        params_conf=float(p.get("conf", DEFAULT_DETECTION_CONF)),
        params_iou=float(p.get("iou", DEFAULT_DETECTION_IOU)),
        params_imgsz=int(p.get("imgsz", DEFAULT_DETECTION_IMGSZ)),
        params_max_det=int(p.get("max_det", DEFAULT_DETECTION_MAX_DET)),
    )


class ConfigurationManager:
    def __init__(
        self,
        config_filepath = CONFIG_FILE_PATH,
        params_filepath = PARAMS_FILE_PATH):

        self.config = read_yaml(config_filepath)
        self.params = read_yaml(params_filepath)

        create_directories([self.config.artifacts_root])

    def get_smoothing_config(self) -> SmoothingConfig:
        return build_smoothing_config(self.params.get("smoothing"))

    def get_selection_config(self) -> SelectionConfig:
        return build_selection_config(self.params.get("selection"))

    def get_kinematics_config(self) -> KinematicsConfig:
        return build_kinematics_config(self.params.get("kinematics"))

    def get_release_config(self) -> ReleaseConfig:
        return build_release_config(self.params.get("release"))

    def get_scoring_config(self) -> ScoringConfig:
        return build_scoring_config(self.params.get("scoring"))

    def get_detection_config(self) -> DetectionConfig:
        config = self.config.shot_analysis
        return build_detection_config(config.model_name, self.params.get("detection"))

    def get_shot_analysis_config(self) -> ShotAnalysisConfig:
        config = self.config.shot_analysis

        create_directories([config.root_dir, config.report_dir])

        shot_analysis_config = ShotAnalysisConfig(
            root_dir=Path(config.root_dir),
            video_dir=Path(config.video_dir),
            report_dir=Path(config.report_dir),
            model_name=config.model_name,
        )
        return shot_analysis_config
