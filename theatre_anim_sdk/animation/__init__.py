"""
Animation clip data model.
"""

from .clip import (
    ROTATION_PROPERTY,
    AnimationClip,
    KeyframeTrack,
    parse_track_name,
    sanitize_node_name,
)

__all__ = [
    "ROTATION_PROPERTY",
    "AnimationClip",
    "KeyframeTrack",
    "parse_track_name",
    "sanitize_node_name",
]
