import math

import cv2
import numpy as np

from mock_device_streamer.config import ProtocolConfig


def generate_frame(frame_num):
    """
    Synthetic camera frame: a gray background with a colored block
    circling the center, so consecutive frames differ.

    Returns:
        (ProtocolConfig.FRAME_HEIGHT, ProtocolConfig.FRAME_WIDTH, 3) uint8 BGR image
    """
    h, w = ProtocolConfig.FRAME_HEIGHT, ProtocolConfig.FRAME_WIDTH
    img = np.full((h, w, 3), 50, dtype=np.uint8)

    angle = frame_num * 0.1
    cx = int(w / 2 + 80 * math.cos(angle))
    cy = int(h / 2 + 60 * math.sin(angle))
    cv2.rectangle(img, (cx - 20, cy - 40), (cx + 20, cy + 40), (0, 0, 255), -1)

    return img


def block_center(frame_num):
    """Pixel center of the block drawn by generate_frame (the "centroid" the device reports)."""
    angle = frame_num * 0.1
    w, h = ProtocolConfig.FRAME_WIDTH, ProtocolConfig.FRAME_HEIGHT
    return (w / 2 + 80 * math.cos(angle), h / 2 + 60 * math.sin(angle))
