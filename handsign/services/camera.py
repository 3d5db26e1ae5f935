"""OpenCV webcam frame source for gesture sessions."""

import logging

import cv2

from ..core.exceptions import SessionError

logger = logging.getLogger(__name__)


def open_camera(config, camera_index: int = 0):
    """Open a webcam configured with the camera settings of ``config``.

    The returned ``cv2.VideoCapture`` is used directly as a session frame
    source (``read() -> (ok, frame)``).

    Raises:
        SessionError: if the camera cannot be opened
    """
    capture = cv2.VideoCapture(camera_index)
    if not capture.isOpened():
        capture.release()
        raise SessionError(f"Failed to open camera {camera_index}")

    capture.set(cv2.CAP_PROP_FRAME_WIDTH, config.camera_width)
    capture.set(cv2.CAP_PROP_FRAME_HEIGHT, config.camera_height)
    capture.set(cv2.CAP_PROP_FPS, config.target_fps)

    actual_width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))
    actual_height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
    logger.info(f"Camera {camera_index} opened: {actual_width}x{actual_height}")
    return capture
