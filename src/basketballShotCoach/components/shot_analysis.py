from __future__ import annotations
from typing import List, Optional

from basketballShotCoach import logger
from basketballShotCoach.components.detection.pose_source import PoseSource
from basketballShotCoach.components.features.shot_features import ShotFeatureBuilder
from basketballShotCoach.components.release.release_detector import ReleaseDetector, shooting_side
from basketballShotCoach.components.scoring.scorer import ShotScorer
from basketballShotCoach.components.selection.subject_selector import SubjectSelector
from basketballShotCoach.core.pose.kinematics import compute_angles, lateral_offset, alignment_angle
from basketballShotCoach.core.signals.smoothing import KeypointSmoother
from basketballShotCoach.entity.config_entity import (
    SmoothingConfig, SelectionConfig, KinematicsConfig, ReleaseConfig, ScoringConfig,
)
from basketballShotCoach.entity.feature_entity import FrameAnalysis, ShotAnalysis, ScoreResult
from basketballShotCoach.entity.pose_entity import MultiPersonFrame, PoseSample


class ShotAnalysisSession:
    """
    One analysis session = one clip of one shooter.
      process_frame(): select primary person -> smooth -> instantaneous angles
      finish():        release frame -> clip features -> scores
      rescore():       same features, new scoring rules
    Filter state lives here and is dropped by reset(); never share a session across clips.
    """

    def __init__(self,
                 smoothing: SmoothingConfig,
                 selection: SelectionConfig,
                 kinematics: KinematicsConfig,
                 release: ReleaseConfig,
                 scoring: ScoringConfig):
        self.kinematics = kinematics
        self.smoother = KeypointSmoother(smoothing)
        self.selector = SubjectSelector(selection)
        self.detector = ReleaseDetector(release, kinematics)
        self.feature_builder = ShotFeatureBuilder(self.detector)
        self.scorer = ShotScorer(scoring)

        self.samples: List[PoseSample] = []
        self.analysis: Optional[ShotAnalysis] = None

    @classmethod
    def from_config(cls, config) -> "ShotAnalysisSession":
        """config: a ConfigurationManager"""
        return cls(
            smoothing=config.get_smoothing_config(),
            selection=config.get_selection_config(),
            kinematics=config.get_kinematics_config(),
            release=config.get_release_config(),
            scoring=config.get_scoring_config(),
        )

    def reset(self) -> None:
        self.smoother.reset()
        self.samples = []
        self.analysis = None

    # ---------- per frame ----------
    def process_frame(self, frame: MultiPersonFrame) -> FrameAnalysis:
        ms = self.kinematics.params_min_keypoint_score
        person = self.selector.select(frame.persons, frame.width, frame.height)
        if person is None:
            self.samples.append(PoseSample(frame.timestamp, None))
            return FrameAnalysis(frame.timestamp, None, compute_angles(None, ms))

        smoothed = self.smoother.smooth_pose(person, frame.timestamp)
        self.samples.append(PoseSample(frame.timestamp, smoothed))
        return FrameAnalysis(
            timestamp=frame.timestamp,
            pose=smoothed,
            angles=compute_angles(smoothed, ms),
            lateral_offset=lateral_offset(smoothed, ms),
            alignment_angle=alignment_angle(smoothed, ms),
        )

    # ---------- per clip ----------
    def _analyse(self) -> ShotAnalysis:
        side = shooting_side(self.samples)
        release = self.detector.detect(self.samples, side)
        stability = self.detector.clip_stability(self.samples, side)
        features = self.feature_builder.build(self.samples, release, side, stability)
        score = self.scorer.score(features)

        analysis = ShotAnalysis(
            features=features,
            stability=stability,
            release_index=release,
            release_timestamp=None if release is None else self.samples[release].timestamp,
            score=score,
            n_samples=len(self.samples),
        )
        logger.info(f"clip analysed: {len(self.samples)} samples, release={release}, total={score.total}")
        return analysis

    def finish(self) -> ShotAnalysis:
        self.analysis = self._analyse()
        return self.analysis

    def rescore(self, scoring: ScoringConfig) -> ScoreResult:
        """
        Score the clip features with other rules. Leaves the session untouched:
        before finish() the features are extracted on the fly and not kept.
        """
        analysis = self.analysis if self.analysis is not None else self._analyse()
        return ShotScorer(scoring).score(analysis.features)

    def analyze(self, source: PoseSource) -> ShotAnalysis:
        """Fresh session over a whole source."""
        self.reset()
        for frame in source:
            self.process_frame(frame)
        return self.finish()
