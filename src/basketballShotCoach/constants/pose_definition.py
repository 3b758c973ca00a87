# --- COCO keypoint order (17 points), as emitted by YOLO-Pose ---
COCO_KEYPOINT_NAMES = [
    "nose", "left_eye", "right_eye", "left_ear", "right_ear",
    "left_shoulder", "right_shoulder",
    "left_elbow", "right_elbow",
    "left_wrist", "right_wrist",
    "left_hip", "right_hip",
    "left_knee", "right_knee",
    "left_ankle", "right_ankle"
]

# --- Full recognized body landmark set (BlazePose / MediaPipe 33 naming) ---
KEYPOINT_NAMES = [
    "nose",
    "left_eye_inner", "left_eye", "left_eye_outer",
    "right_eye_inner", "right_eye", "right_eye_outer",
    "left_ear", "right_ear",
    "mouth_left", "mouth_right",
    "left_shoulder", "right_shoulder",
    "left_elbow", "right_elbow",
    "left_wrist", "right_wrist",
    "left_pinky", "right_pinky",
    "left_index", "right_index",
    "left_thumb", "right_thumb",
    "left_hip", "right_hip",
    "left_knee", "right_knee",
    "left_ankle", "right_ankle",
    "left_heel", "right_heel",
    "left_foot_index", "right_foot_index",
]

LEFT, RIGHT = "left", "right"
# right side is tried first when nothing else separates the two
SIDES = (RIGHT, LEFT)

# --- Name aliases for convenience ---
NOSE = "nose"
L_SH, R_SH = "left_shoulder", "right_shoulder"
L_EL, R_EL = "left_elbow", "right_elbow"
L_WR, R_WR = "left_wrist", "right_wrist"
L_HIP, R_HIP = "left_hip", "right_hip"
L_KNE, R_KNE = "left_knee", "right_knee"
L_ANK, R_ANK = "left_ankle", "right_ankle"

# hand tip candidates, most to least preferred (wrist angle)
HAND_TIP_ORDER = ("index", "pinky", "thumb")
# foot tip candidates (ankle angle)
FOOT_TIP_ORDER = ("foot_index", "heel")


def side_name(side: str, part: str) -> str:
    """'right', 'elbow' -> 'right_elbow'"""
    return f"{side}_{part}"
