"""Image preprocessing helpers built on OpenCV."""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from ..core.constants import LETTERBOX_FILL
from ..core.entities import Rect

logger = logging.getLogger(__name__)


def letterbox(image: np.ndarray, target_width: int, target_height: int,
              fill: int = LETTERBOX_FILL) -> Tuple[np.ndarray, float]:
    """Resize ``image`` into a fixed canvas preserving aspect ratio.

    The resized image is anchored at the top-left corner and the remainder is
    filled with a neutral grey, so dividing decoded coordinates by the returned
    scale maps them back to the source image.

    Returns:
        (canvas, scale) where ``scale = min(target_w / w, target_h / h)``
    """
    if image is None or image.size == 0:
        raise ValueError("Cannot letterbox an empty image")

    src_h, src_w = image.shape[:2]
    scale = min(target_width / src_w, target_height / src_h)
    new_w = max(1, min(target_width, int(round(src_w * scale))))
    new_h = max(1, min(target_height, int(round(src_h * scale))))

    if image.ndim == 2:
        image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)

    resized = cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_LINEAR)
    canvas = np.full((target_height, target_width, 3), fill, dtype=np.uint8)
    canvas[:new_h, :new_w] = resized[:, :, :3]
    return canvas, scale


def to_input_tensor(canvas: np.ndarray) -> np.ndarray:
    """HWC uint8 canvas to a float32 NCHW tensor (channel order untouched)."""
    chw = np.transpose(canvas, (2, 0, 1)).astype(np.float32)
    return np.ascontiguousarray(chw[np.newaxis, ...])


def crop_region(image: np.ndarray, rect: Rect, padding: float = 0.0) -> Optional[np.ndarray]:
    """Crop ``rect`` (optionally padded by a fraction of its size) from ``image``.

    The rectangle is clamped to the image bounds. Returns None when nothing is
    left after clamping.
    """
    h, w = image.shape[:2]
    pad_x = rect.width * padding
    pad_y = rect.height * padding
    x1 = max(0, int(rect.min_x - pad_x))
    y1 = max(0, int(rect.min_y - pad_y))
    x2 = min(w, int(np.ceil(rect.max_x + pad_x)))
    y2 = min(h, int(np.ceil(rect.max_y + pad_y)))
    if x2 <= x1 or y2 <= y1:
        logger.debug(f"Empty crop for region {rect} in {w}x{h} image")
        return None
    return image[y1:y2, x1:x2]
