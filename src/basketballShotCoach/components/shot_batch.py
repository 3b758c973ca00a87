from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional

from tqdm import tqdm

from basketballShotCoach import logger
from basketballShotCoach.components.detection.pose_source import PoseSource, JsonPoseSource
from basketballShotCoach.components.shot_analysis import ShotAnalysisSession
from basketballShotCoach.entity.config_entity import ShotAnalysisConfig, DetectionConfig
from basketballShotCoach.utils.common import iter_files, save_json

VIDEO_EXTENSIONS = (".mp4", ".mov", ".avi", ".mkv")
DETECTION_EXTENSIONS = (".json",)


class ShotBatchAnalysis:
    """
    - Walks video_dir for clips (videos, or .json files of recorded detections)
    - Each clip: fresh session -> ShotAnalysis -> report_dir/<stem>.json
    - Writes report_dir/index.json with ok/skip lists
    """

    def __init__(self, cfg: ShotAnalysisConfig, detection: DetectionConfig, session: ShotAnalysisSession):
        self.cfg = cfg
        self.detection = detection
        self.session = session

    def _open_source(self, clip_path: str) -> PoseSource:
        if clip_path.lower().endswith(DETECTION_EXTENSIONS):
            return JsonPoseSource(Path(clip_path))
        # model weights are only needed for real videos
        from basketballShotCoach.components.detection.yolo_pose_source import YoloPoseSource
        return YoloPoseSource(self.detection, clip_path)

    def _report_path(self, clip_path: str) -> Path:
        return Path(self.cfg.report_dir) / f"{Path(clip_path).stem}.json"

    def process_one(self, clip_path: str) -> Optional[str]:
        """Analyse one clip and save its report. Returns the report path, None if nothing was detected."""
        with self._open_source(clip_path) as source:
            analysis = self.session.analyze(source)

        if all(s.pose is None for s in self.session.samples):
            logger.warning(f"[SKIP] {clip_path} | no person detected")
            return None

        report = {"clip": str(clip_path), **analysis.to_dict()}
        out = self._report_path(clip_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        save_json(out, report)
        return str(out)

    def run_all(self) -> Dict[str, List[str]]:
        root = Path(self.cfg.video_dir)
        if not root.exists():
            raise FileNotFoundError(f"Clip folder not found: {root}")

        clips = list(iter_files(str(root), VIDEO_EXTENSIONS + DETECTION_EXTENSIONS))
        ok_paths: List[str] = []
        skip_list: List[str] = []

        for clip in tqdm(clips, desc="Analyse shots", unit="clip"):
            try:
                out = self.process_one(clip)
                if out is not None:
                    ok_paths.append(out)
                else:
                    skip_list.append(clip)
            except Exception as e:
                logger.error(f"[ERROR] {clip}: {e}")
                skip_list.append(clip)

        results = {"ok": ok_paths, "skip": skip_list}
        index_path = Path(self.cfg.report_dir) / "index.json"
        index_path.parent.mkdir(parents=True, exist_ok=True)
        save_json(index_path, results)
        logger.info(f"[OK] analysed={len(ok_paths)} | skipped={len(skip_list)} -> {index_path}")
        return results
