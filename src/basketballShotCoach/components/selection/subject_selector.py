from __future__ import annotations
from typing import Dict, List, Optional, Any

import numpy as np

from basketballShotCoach import logger
from basketballShotCoach.entity.config_entity import SelectionConfig
from basketballShotCoach.entity.pose_entity import PersonPose


def candidate_terms(person: PersonPose, W: float, H: float, min_visibility: float) -> Optional[Dict[str, float]]:
    """
    Heuristic terms for one candidate, all scaled to roughly [0,1] by the frame size:
      area       bbox area of the qualifying keypoints / frame area
      foot       lowest (largest y) qualifying keypoint / frame height
      center     -|bbox center x - frame center x| / frame width
      confidence mean score of the qualifying keypoints
    Qualifying = score above min_visibility (unscored points qualify).
    None when no keypoint qualifies.
    """
    ks = [k for k in person.keypoints.values() if k.score is None or k.score > min_visibility]
    if not ks:
        return None
    xs = np.array([k.x for k in ks], dtype=np.float64)
    ys = np.array([k.y for k in ks], dtype=np.float64)
    scores = np.array([1.0 if k.score is None else k.score for k in ks], dtype=np.float64)

    W = max(float(W), 1.0)
    H = max(float(H), 1.0)
    area = (xs.max() - xs.min()) * (ys.max() - ys.min())
    cx = (xs.min() + xs.max()) / 2.0
    return {
        "area": float(area / (W * H)),
        "foot": float(ys.max() / H),
        "center": float(-abs(cx - W / 2.0) / W),
        "confidence": float(scores.mean()),
    }


class SubjectSelector:
    """
    Picks the primary (shooting) person out of a multi-person detection:
    bigger, lower-in-frame, more centred and more confident wins.
    """
    def __init__(self, config: SelectionConfig):
        self.config = config
        self.last_details: Dict[int, Dict[str, Any]] = {}

    def _weighted(self, terms: Dict[str, float]) -> float:
        c = self.config
        return (c.params_area_weight * terms["area"]
                + c.params_foot_weight * terms["foot"]
                + c.params_center_weight * terms["center"]
                + c.params_confidence_weight * terms["confidence"])

    def select(self, persons: List[PersonPose], frame_width: float, frame_height: float) -> Optional[PersonPose]:
        self.last_details = {}
        if not persons:
            return None
        if len(persons) == 1:
            return persons[0]

        best, best_score = None, -np.inf
        for i, person in enumerate(persons):
            terms = candidate_terms(person, frame_width, frame_height, self.config.params_min_visibility)
            if terms is None:
                continue
            score = self._weighted(terms)
            self.last_details[i] = {**terms, "score": score}
            # strict '>' keeps the earlier candidate on an exact tie
            if score > best_score:
                best, best_score = person, score

        if best is None:
            logger.debug(f"no candidate out of {len(persons)} has a visible keypoint")
        return best
