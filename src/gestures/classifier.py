"""
Static gesture classification from a single frame of hand landmarks.
Detects pinch, pointing, peace, open palm, fist and thumbs up/down.
"""
from enum import Enum, auto
from typing import Dict, Tuple
import math

import numpy as np

from .landmarks import HandLandmarks, Point3


# Distance ratios (tip-to-wrist vs MCP-to-wrist) above which a digit counts as extended.
# The thumb folds across the palm, so it needs a larger ratio than the other fingers.
FINGER_EXTENSION_RATIO = 1.1
THUMB_EXTENSION_RATIO = 1.3

# Max thumb-tip to index-tip distance (normalized, 3-D) for a pinch
PINCH_THRESHOLD = 0.03

# (MCP, PIP, DIP, TIP) per finger
FINGERS: Dict[str, Tuple[int, int, int, int]] = {
    'index': (HandLandmarks.INDEX_MCP, HandLandmarks.INDEX_PIP,
              HandLandmarks.INDEX_DIP, HandLandmarks.INDEX_TIP),
    'middle': (HandLandmarks.MIDDLE_MCP, HandLandmarks.MIDDLE_PIP,
               HandLandmarks.MIDDLE_DIP, HandLandmarks.MIDDLE_TIP),
    'ring': (HandLandmarks.RING_MCP, HandLandmarks.RING_PIP,
             HandLandmarks.RING_DIP, HandLandmarks.RING_TIP),
    'pinky': (HandLandmarks.PINKY_MCP, HandLandmarks.PINKY_PIP,
              HandLandmarks.PINKY_DIP, HandLandmarks.PINKY_TIP),
}


class GestureCategory(Enum):
    """Detected gesture types."""
    IDLE = auto()
    PINCH = auto()
    POINTING = auto()
    PEACE = auto()
    OPEN_PALM = auto()
    CLOSED_FIST = auto()
    THUMBS_UP = auto()
    THUMBS_DOWN = auto()


def _distance_2d(p1: Point3, p2: Point3) -> float:
    """Calculate 2D distance between two 3D points (ignoring z)."""
    dx = p1.x - p2.x
    dy = p1.y - p2.y
    return math.sqrt(dx*dx + dy*dy)


def _distance_3d(p1: Point3, p2: Point3) -> float:
    dx = p1.x - p2.x
    dy = p1.y - p2.y
    dz = p1.z - p2.z
    return math.sqrt(dx*dx + dy*dy + dz*dz)


def is_finger_extended(hand: HandLandmarks, finger: str) -> bool:
    """
    Check whether index, middle, ring or pinky is extended.

    The finger is extended when its tip lies noticeably farther from the
    wrist than its MCP joint does (planar distances).
    """
    mcp_idx, _, _, tip_idx = FINGERS[finger]
    wrist = hand.wrist
    tip_to_wrist = _distance_2d(hand[tip_idx], wrist)
    mcp_to_wrist = _distance_2d(hand[mcp_idx], wrist)
    return tip_to_wrist > mcp_to_wrist * FINGER_EXTENSION_RATIO


def is_thumb_extended(hand: HandLandmarks) -> bool:
    """Check whether the thumb tip reaches well past the thumb MCP, seen from the wrist."""
    wrist = hand.wrist
    tip_to_wrist = _distance_2d(hand.thumb_tip, wrist)
    mcp_to_wrist = _distance_2d(hand[HandLandmarks.THUMB_MCP], wrist)
    return tip_to_wrist > mcp_to_wrist * THUMB_EXTENSION_RATIO


def is_pinching(hand: HandLandmarks) -> bool:
    return _distance_3d(hand.thumb_tip, hand.index_tip) < PINCH_THRESHOLD


def classify(hand: HandLandmarks) -> GestureCategory:
    """
    Classify a hand pose. Rules are checked in priority order and the first
    match wins; anything unmatched is IDLE.

    Args:
        hand: A complete 21-point landmark set

    Returns:
        The detected GestureCategory
    """
    thumb = is_thumb_extended(hand)
    index = is_finger_extended(hand, 'index')
    middle = is_finger_extended(hand, 'middle')
    ring = is_finger_extended(hand, 'ring')
    pinky = is_finger_extended(hand, 'pinky')
    extended = sum((index, middle, ring, pinky))

    if is_pinching(hand) and index and extended <= 1:
        return GestureCategory.PINCH

    if index and not middle and not ring and not pinky:
        return GestureCategory.POINTING

    if index and middle and not ring and not pinky:
        return GestureCategory.PEACE

    if extended >= 4:
        return GestureCategory.OPEN_PALM

    if extended == 0 and not thumb:
        return GestureCategory.CLOSED_FIST

    # Image y grows downward, so "up" is a smaller y than the wrist
    thumb_y = hand.thumb_tip.y
    wrist_y = hand.wrist.y
    if thumb and extended == 0 and thumb_y < wrist_y:
        return GestureCategory.THUMBS_UP

    if thumb and extended == 0 and thumb_y > wrist_y:
        return GestureCategory.THUMBS_DOWN

    return GestureCategory.IDLE


def finger_bend_angles(hand: HandLandmarks) -> Dict[str, float]:
    """
    Angle in degrees at each finger's DIP joint, between the MCP and the tip.
    180 means a straight finger; smaller values mean more bend.
    """
    angles = {}
    for name, (mcp_idx, _, dip_idx, tip_idx) in FINGERS.items():
        dip = np.asarray(hand[dip_idx])
        a = np.asarray(hand[mcp_idx]) - dip
        b = np.asarray(hand[tip_idx]) - dip
        norm = np.linalg.norm(a) * np.linalg.norm(b)
        if norm == 0:
            angles[name] = 180.0
            continue
        cos = np.clip(np.dot(a, b) / norm, -1.0, 1.0)
        angles[name] = float(np.degrees(np.arccos(cos)))
    return angles
