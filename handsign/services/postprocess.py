"""YOLOX output post-processing: grid table, box decoding and greedy NMS.

The detector emits one row per anchor,
``[dx, dy, log_w, log_h, objectness, class_0 .. class_{n-1}]``, with rows
ordered stride-major (small strides first) and row-major inside each stride's
grid. Decoding needs the grid cell and stride of every row, which only depend
on the input shape, so the table is built once per shape and cached.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.constants import DEFAULT_STRIDES
from ..core.entities import Detection, GridEntry
from ..core.exceptions import TensorShapeError
from ..utils.geometry import iou_xyxy

logger = logging.getLogger(__name__)

NUM_BOX_ATTRS = 5  # dx, dy, log_w, log_h, objectness


def build_grids(width: int, height: int, strides: Sequence[int] = DEFAULT_STRIDES) -> List[GridEntry]:
    """Enumerate (cell_x, cell_y, stride) for every anchor of the flattened output."""
    grids: List[GridEntry] = []
    for stride in strides:
        h_cells = height // stride
        w_cells = width // stride
        for y in range(h_cells):
            for x in range(w_cells):
                grids.append(GridEntry(x, y, stride))
    return grids


def expected_anchor_count(width: int, height: int, strides: Sequence[int] = DEFAULT_STRIDES) -> int:
    return sum((height // s) * (width // s) for s in strides)


class GridCache:
    """Grid tables keyed by input shape, owned by one pipeline."""

    def __init__(self):
        self._tables: Dict[Tuple[int, int, Tuple[int, ...]], np.ndarray] = {}

    def get(self, width: int, height: int, strides: Sequence[int]) -> np.ndarray:
        """Return the grid table as an ``(N, 3)`` int array of (cell_x, cell_y, stride)."""
        key = (int(width), int(height), tuple(int(s) for s in strides))
        table = self._tables.get(key)
        if table is None:
            entries = build_grids(*key)
            table = np.asarray(entries, dtype=np.int32).reshape(-1, 3)
            self._tables[key] = table
            logger.debug(f"Built grid table for {key[0]}x{key[1]} strides={key[2]}: {len(entries)} anchors")
        return table

    def __len__(self) -> int:
        return len(self._tables)

    def clear(self) -> None:
        self._tables.clear()


def resolve_label(class_id: int, labels: Sequence[str]) -> str:
    if 0 <= class_id < len(labels):
        return labels[class_id]
    return f"ID:{class_id}"


def _as_grid_array(grids) -> np.ndarray:
    if isinstance(grids, np.ndarray):
        return grids.reshape(-1, 3).astype(np.int32, copy=False)
    return np.asarray(list(grids), dtype=np.int32).reshape(-1, 3)


def _validate_output(raw_output, num_anchors: int, num_classes: Optional[int]) -> np.ndarray:
    output = np.asarray(raw_output, dtype=np.float64)
    if output.ndim == 3 and output.shape[0] == 1:
        output = output[0]
    if output.ndim != 2:
        raise TensorShapeError(f"Expected a (anchors, attributes) output, got shape {output.shape}")

    anchors, attrs = output.shape
    if anchors != num_anchors:
        raise TensorShapeError(
            f"Output has {anchors} anchors but the grid table has {num_anchors}; "
            f"input size or strides do not match the model"
        )
    if attrs < NUM_BOX_ATTRS + 1:
        raise TensorShapeError(f"Output rows have {attrs} attributes, need at least {NUM_BOX_ATTRS + 1}")
    if num_classes is not None and attrs != NUM_BOX_ATTRS + num_classes:
        raise TensorShapeError(
            f"Output rows have {attrs - NUM_BOX_ATTRS} class scores but {num_classes} labels are configured"
        )
    return output


def decode_outputs(raw_output, grids, score_threshold: float,
                   labels: Sequence[str] = (), num_classes: Optional[int] = None) -> List[Detection]:
    """Decode raw anchor rows into candidate detections.

    Args:
        raw_output: ``(N, 5 + C)`` or ``(1, N, 5 + C)`` array
        grids: grid table from :func:`build_grids` or :class:`GridCache`
        score_threshold: minimum objectness and minimum final score
        labels: class label table; ids outside it become ``"ID:<n>"``
        num_classes: when given, the class slice width must equal it

    Returns:
        Detections in letterboxed input coordinates, in anchor order.

    Raises:
        TensorShapeError: if the tensor does not fit the grid table or label count
    """
    grid = _as_grid_array(grids)
    output = _validate_output(raw_output, len(grid), num_classes)

    objectness = output[:, 4]
    candidates = np.nonzero(objectness >= score_threshold)[0]
    if candidates.size == 0:
        return []

    class_scores = output[candidates, NUM_BOX_ATTRS:]
    class_ids = np.argmax(class_scores, axis=1)
    class_conf = class_scores[np.arange(len(candidates)), class_ids]
    scores = objectness[candidates] * class_conf

    keep = scores >= score_threshold
    candidates = candidates[keep]
    if candidates.size == 0:
        return []
    class_ids = class_ids[keep]
    scores = scores[keep]

    rows = output[candidates]
    cells = grid[candidates]
    strides = cells[:, 2]
    with np.errstate(over="ignore", invalid="ignore"):
        cx = (rows[:, 0] + cells[:, 0]) * strides
        cy = (rows[:, 1] + cells[:, 1]) * strides
        w = np.exp(rows[:, 2]) * strides
        h = np.exp(rows[:, 3]) * strides
        boxes = np.stack([cx - w / 2, cy - h / 2, cx + w / 2, cy + h / 2], axis=1)

    finite = np.all(np.isfinite(boxes), axis=1)
    if not np.all(finite):
        logger.debug(f"Discarding {int(np.count_nonzero(~finite))} non-finite decoded boxes")

    detections: List[Detection] = []
    for box, score, class_id in zip(boxes[finite], scores[finite], class_ids[finite]):
        class_id = int(class_id)
        detections.append(Detection(
            class_id=class_id,
            score=float(score),
            bbox=(float(box[0]), float(box[1]), float(box[2]), float(box[3])),
            label=resolve_label(class_id, labels),
        ))
    return detections


def suppress(detections: Sequence[Detection], iou_threshold: float) -> List[Detection]:
    """Greedy non-maximum suppression.

    Candidates are visited by descending score (stable for ties). Each kept box
    removes every remaining box overlapping it by more than ``iou_threshold``.
    """
    remaining = sorted(detections, key=lambda d: d.score, reverse=True)
    kept: List[Detection] = []
    while remaining:
        best = remaining.pop(0)
        kept.append(best)
        remaining = [d for d in remaining if iou_xyxy(best.bbox, d.bbox) <= iou_threshold]
    return kept
