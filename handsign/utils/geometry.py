"""Geometry and bounding box utilities."""

from typing import Iterable, Optional, Sequence, Tuple

from ..core.entities import Rect


def iou_xyxy(boxA, boxB) -> float:
    """Calculate Intersection over Union (IoU) for two boxes."""
    # boxA/B: [x1,y1,x2,y2]
    xA = max(boxA[0], boxB[0])
    yA = max(boxA[1], boxB[1])
    xB = min(boxA[2], boxB[2])
    yB = min(boxA[3], boxB[3])
    interW = max(0.0, xB - xA)
    interH = max(0.0, yB - yA)
    interArea = interW * interH
    boxAArea = max(0.0, boxA[2] - boxA[0]) * max(0.0, boxA[3] - boxA[1])
    boxBArea = max(0.0, boxB[2] - boxB[0]) * max(0.0, boxB[3] - boxB[1])
    denom = float(boxAArea + boxBArea - interArea)
    if denom <= 0:
        return 0.0
    return interArea / denom


def _point_xy(point) -> Tuple[float, float]:
    if hasattr(point, "x") and hasattr(point, "y"):
        return float(point.x), float(point.y)
    return float(point[0]), float(point[1])


def rect_from_landmarks(points: Iterable, image_size: Optional[Tuple[int, int]] = None) -> Rect:
    """Tight bounding rectangle of a landmark set.

    Points may be ``(x, y)`` pairs or objects exposing ``.x``/``.y`` (MediaPipe
    landmarks). When ``image_size`` (width, height) is given the coordinates
    are treated as normalized and scaled to pixels.
    """
    coords = [_point_xy(p) for p in points]
    if not coords:
        raise ValueError("Landmark set is empty")
    xs = [c[0] for c in coords]
    ys = [c[1] for c in coords]
    if image_size is not None:
        w, h = image_size
        xs = [x * w for x in xs]
        ys = [y * h for y in ys]
    return Rect(min_x=min(xs), max_x=max(xs), min_y=min(ys), max_y=max(ys))


def rects_overlap(a: Rect, b: Rect) -> bool:
    """True when the two rectangles share a region of positive area."""
    return (a.min_x < b.max_x and b.min_x < a.max_x and
            a.min_y < b.max_y and b.min_y < a.max_y)


def merge_rects(a: Rect, b: Rect) -> Rect:
    return Rect(
        min_x=min(a.min_x, b.min_x),
        max_x=max(a.max_x, b.max_x),
        min_y=min(a.min_y, b.min_y),
        max_y=max(a.max_y, b.max_y),
    )


def select_region(rects: Sequence[Rect]) -> Optional[Rect]:
    """Pick the region to classify for this frame.

    A single hand is classified as-is; two overlapping hands form one sign and
    are merged. Any other arrangement yields nothing to classify.
    """
    if len(rects) == 1:
        return rects[0]
    if len(rects) == 2 and rects_overlap(rects[0], rects[1]):
        return merge_rects(rects[0], rects[1])
    return None
