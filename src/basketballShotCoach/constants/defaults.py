# Default tunables. ConfigurationManager falls back to these when params.yaml
# leaves a key out, so an explicit params.yaml with the same numbers is equivalent.

# --- one-euro smoothing ---
DEFAULT_MIN_CUTOFF = 1.15
DEFAULT_BETA = 0.05
DEFAULT_D_CUTOFF = 1.0
MIN_DT = 1e-3          # seconds
MIN_CUTOFF_FLOOR = 1e-6

# --- primary subject selection ---
DEFAULT_MIN_VISIBILITY = 0.2
DEFAULT_AREA_WEIGHT = 1.1
DEFAULT_FOOT_WEIGHT = 0.15
DEFAULT_CENTER_WEIGHT = 0.4
DEFAULT_CONFIDENCE_WEIGHT = 0.05

# --- kinematics ---
DEFAULT_MIN_KEYPOINT_SCORE = 0.15

# --- release detection ---
DEFAULT_MIN_ELBOW_DEG = 150.0
DEFAULT_MIN_WRIST_LIFT = 4.0   # pixels
DEFAULT_LOOKBACK = 2

# --- scoring ---
DEFAULT_FLOOR = 20
DEFAULT_WORST_MULTIPLIER = 5.0
MIN_TOLERANCE = 1e-6
DEFAULT_BUCKET_WEIGHT = 1.0

CLOSER, BIGGER, SMALLER = "closer", "bigger", "smaller"
POLICY_ALIASES = {
    "closer": CLOSER,
    "bigger": BIGGER,
    ">=|": BIGGER,
    "smaller": SMALLER,
    "<=|": SMALLER,
}

NOT_DETECTED = "未检测"

# unit tag -> (multiplier applied before formatting, suffix)
UNIT_LABELS = {
    "deg": (1.0, "度"),
    "deg/s": (1.0, "(度/秒)"),
    "s": (1.0, "秒"),
    "pct": (100.0, "%"),
}

DEFAULT_SCORING_BUCKETS = [
    {
        "name": "lower",
        "weight": 1.0,
        "items": [
            {"key": "squat", "feature": "squat_knee_angle",
             "target": 165, "tolerance": 8, "policy": "closer", "unit": "deg", "decimals": 2},
            {"key": "kneeExt", "feature": "knee_ext_speed",
             "target": 260, "tolerance": 0, "policy": "bigger", "unit": "deg/s", "decimals": 0},
        ],
    },
    {
        "name": "upper",
        "weight": 1.0,
        "items": [
            {"key": "releaseAngle", "feature": "release_angle",
             "target": 158, "tolerance": 10, "policy": "closer", "unit": "deg", "decimals": 2},
            {"key": "armPower", "feature": "arm_power_angle",
             "target": 35, "tolerance": 6, "policy": "closer", "unit": "deg", "decimals": 0},
            {"key": "follow", "feature": "follow_duration",
             "target": 0.4, "tolerance": 0.12, "policy": "closer", "unit": "s", "decimals": 2},
            {"key": "elbowTight", "feature": "elbow_tightness",
             "target": 0.02, "tolerance": 0, "policy": "smaller", "unit": "pct", "decimals": 2,
             "worst_multiplier": 6.0},
        ],
    },
    {
        "name": "balance",
        "weight": 1.0,
        "items": [
            {"key": "center", "feature": "sway_percent",
             "target": 0.08, "tolerance": 0, "policy": "smaller", "unit": "pct", "decimals": 2,
             "worst_multiplier": 5.0},
            {"key": "align", "feature": "align_angle",
             "target": 5, "tolerance": 0, "policy": "smaller", "unit": "deg", "decimals": 2,
             "worst": 20},
        ],
    },
]

# --- YOLO-Pose detection ---
DEFAULT_DETECTION_CONF = 0.25
DEFAULT_DETECTION_IOU = 0.5
DEFAULT_DETECTION_IMGSZ = 960
DEFAULT_DETECTION_MAX_DET = 4
