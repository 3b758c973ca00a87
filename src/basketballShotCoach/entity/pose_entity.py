from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any


@dataclass(frozen=True)
class Keypoint:
    """One named landmark in source-image pixels. score may be None (detector gave no confidence)."""
    name: str
    x: float
    y: float
    score: Optional[float] = None

    def visible(self, min_score: float) -> bool:
        # a missing confidence counts as visible
        return self.score is None or self.score >= min_score

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "x": self.x, "y": self.y, "score": self.score}


@dataclass
class PersonPose:
    """Keypoints of one person in one frame, keyed by name."""
    keypoints: Dict[str, Keypoint]
    timestamp: float = 0.0

    @classmethod
    def from_keypoints(cls, keypoints: List[Keypoint], timestamp: float = 0.0) -> "PersonPose":
        # later duplicates of a name overwrite earlier ones
        return cls({k.name: k for k in keypoints}, timestamp)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], timestamp: float = 0.0) -> "PersonPose":
        kps = [
            Keypoint(str(k["name"]), float(k["x"]), float(k["y"]),
                     None if k.get("score") is None else float(k["score"]))
            for k in data.get("keypoints", [])
        ]
        return cls.from_keypoints(kps, float(data.get("timestamp", timestamp)))

    def get(self, name: str) -> Optional[Keypoint]:
        return self.keypoints.get(name)

    def __len__(self) -> int:
        return len(self.keypoints)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "keypoints": [self.keypoints[n].to_dict() for n in sorted(self.keypoints)],
        }


@dataclass
class MultiPersonFrame:
    """Everything the detector saw in one video frame."""
    timestamp: float
    width: int
    height: int
    persons: List[PersonPose] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MultiPersonFrame":
        ts = float(data["timestamp"])
        persons = [PersonPose.from_dict(p, ts) for p in data.get("persons", [])]
        return cls(ts, int(data.get("width", 0)), int(data.get("height", 0)), persons)


@dataclass(frozen=True)
class PoseSample:
    """One entry of a clip: smoothed primary pose (None when nobody was found) at a time."""
    timestamp: float
    pose: Optional[PersonPose]
