from __future__ import annotations
from typing import Optional

import cv2
import numpy as np
from ultralytics import YOLO

from basketballShotCoach.constants import COCO_KEYPOINT_NAMES
from basketballShotCoach.components.detection.pose_source import PoseSource
from basketballShotCoach.entity.config_entity import DetectionConfig
from basketballShotCoach.entity.pose_entity import Keypoint, PersonPose, MultiPersonFrame


def persons_from_result(res, timestamp: float) -> list:
    """YOLO-Pose result of one frame -> PersonPose list (COCO-17 names, pixel coords)."""
    if res.keypoints is None or res.keypoints.xy is None or len(res.keypoints.xy) == 0:
        return []
    kxy = res.keypoints.xy.cpu().numpy()                  # (N,V,2)
    ksc = getattr(res.keypoints, "conf", None)
    if ksc is None:
        ksc = np.ones(kxy.shape[:2], dtype=np.float32)    # (N,V)
    else:
        ksc = ksc.cpu().numpy()

    persons = []
    for i in range(kxy.shape[0]):
        kps = [
            Keypoint(name, float(kxy[i, v, 0]), float(kxy[i, v, 1]), float(ksc[i, v]))
            for v, name in enumerate(COCO_KEYPOINT_NAMES[: kxy.shape[1]])
        ]
        persons.append(PersonPose.from_keypoints(kps, timestamp))
    return persons


class YoloPoseSource(PoseSource):
    """Runs YOLO-Pose on every frame of a video file."""
    def __init__(self, config: DetectionConfig, video_path: str):
        self.config = config
        self.video_path = str(video_path)
        self.model = YOLO(config.model_name)

        self.cap = cv2.VideoCapture(self.video_path)
        if not self.cap.isOpened():
            raise RuntimeError(f"Cannot open video: {video_path}")

        fps = self.cap.get(cv2.CAP_PROP_FPS)
        self.fps = float(fps) if fps and fps > 0 else 30.0
        self.frame_idx = 0

    def read(self) -> Optional[MultiPersonFrame]:
        ok, frame = self.cap.read()
        if not ok:
            return None
        ts = self.frame_idx / self.fps
        self.frame_idx += 1

        results = self.model.predict(
            frame,
            conf=self.config.params_conf,
            iou=self.config.params_iou,
            imgsz=self.config.params_imgsz,
            max_det=self.config.params_max_det,
            classes=[0],  # person
            verbose=False,
        )
        persons = persons_from_result(results[0], ts) if len(results) > 0 else []
        H, W = frame.shape[:2]
        return MultiPersonFrame(ts, W, H, persons)

    def close(self) -> None:
        self.cap.release()
