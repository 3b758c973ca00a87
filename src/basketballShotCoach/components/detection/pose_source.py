from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, Optional

from basketballShotCoach.entity.pose_entity import MultiPersonFrame
from basketballShotCoach.utils.common import load_json


class PoseSource(ABC):
    """
    Anything that yields one MultiPersonFrame per video frame.
    read() returns None once the source is exhausted.
    """

    @abstractmethod
    def read(self) -> Optional[MultiPersonFrame]:
        ...

    def close(self) -> None:
        pass

    def __iter__(self) -> Iterator[MultiPersonFrame]:
        while True:
            frame = self.read()
            if frame is None:
                return
            yield frame

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class JsonPoseSource(PoseSource):
    """
    Replays recorded detections:
    {"width": W, "height": H,
     "frames": [{"timestamp": s, "persons": [{"keypoints": [{"name","x","y","score"}, ...]}]}]}
    A frame may override width/height.
    """
    def __init__(self, path: Path):
        data = load_json(Path(path))
        self.width = int(data.get("width", 0))
        self.height = int(data.get("height", 0))
        self._frames = list(data.get("frames", []))
        self._pos = 0

    def __len__(self) -> int:
        return len(self._frames)

    def read(self) -> Optional[MultiPersonFrame]:
        if self._pos >= len(self._frames):
            return None
        raw = dict(self._frames[self._pos])
        self._pos += 1
        raw.setdefault("width", self.width)
        raw.setdefault("height", self.height)
        return MultiPersonFrame.from_dict(raw)
