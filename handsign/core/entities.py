"""Domain entities (data-only structures) used across services."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Tuple

BBox = Tuple[float, float, float, float]  # (x1,y1,x2,y2)


class GridEntry(NamedTuple):
    """Grid cell and stride of one anchor row in the flattened output tensor."""
    cell_x: int
    cell_y: int
    stride: int


@dataclass(slots=True)
class Detection:
    class_id: int
    score: float
    bbox: BBox
    label: str = ""

    def __post_init__(self):
        if len(self.bbox) != 4:
            raise ValueError(f"bbox must have 4 coordinates, got {len(self.bbox)}")
        x1, y1, x2, y2 = self.bbox
        if x1 > x2 or y1 > y2:
            raise ValueError(f"Invalid bbox corners: {self.bbox}")
        self.bbox = (float(x1), float(y1), float(x2), float(y2))

    @property
    def x1(self) -> float:
        return self.bbox[0]

    @property
    def y1(self) -> float:
        return self.bbox[1]

    @property
    def x2(self) -> float:
        return self.bbox[2]

    @property
    def y2(self) -> float:
        return self.bbox[3]

    @property
    def width(self) -> float:
        return self.bbox[2] - self.bbox[0]

    @property
    def height(self) -> float:
        return self.bbox[3] - self.bbox[1]

    @property
    def area(self) -> float:
        return self.width * self.height

    def scaled(self, scale: float) -> "Detection":
        """Map letterboxed coordinates back to the source image."""
        x1, y1, x2, y2 = self.bbox
        return Detection(
            class_id=self.class_id,
            score=self.score,
            bbox=(x1 / scale, y1 / scale, x2 / scale, y2 / scale),
            label=self.label,
        )

    def to_dict(self) -> Dict[str, Any]:
        x1, y1, x2, y2 = self.bbox
        return {
            "x1": x1, "y1": y1, "x2": x2, "y2": y2,
            "score": self.score,
            "class_id": self.class_id,
            "label": self.label,
        }


@dataclass(slots=True, frozen=True)
class Rect:
    """Axis-aligned hand region in pixel coordinates."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(slots=True, frozen=True)
class Prediction:
    label: str
    confidence: float


@dataclass(slots=True, frozen=True)
class CommitEvent:
    """A label that survived debouncing."""
    label: str
    committed: Tuple[str, ...]
    progress: float
    confidence: float = 1.0


@dataclass(slots=True, frozen=True)
class SequenceTarget:
    name: str
    sequence: Tuple[str, ...]
    target_id: Optional[str] = None
    level: Optional[str] = None

    @property
    def key(self) -> str:
        return self.target_id or self.name

    def __len__(self) -> int:
        return len(self.sequence)


class OutcomeKind(Enum):
    NONE = "none"
    STEP = "step"
    MATCHED = "matched"
    COMPLETED = "completed"
    TARGET_COMPLETED = "target_completed"
    RANK_PASSED = "rank_passed"


@dataclass(slots=True, frozen=True)
class MatchOutcome:
    kind: OutcomeKind
    target: Optional[str] = None
    step_index: int = 0
    committed: Tuple[str, ...] = field(default_factory=tuple)
    elapsed_seconds: Optional[float] = None
    rank: Optional[int] = None

    @property
    def is_event(self) -> bool:
        return self.kind is not OutcomeKind.NONE


@dataclass(slots=True, frozen=True)
class RankLevel:
    rank: int
    key: str
    name: str
    title: str
