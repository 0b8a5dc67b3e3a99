"""
Clip playback and cross-fade blending.
"""

from .action import PlayableAction
from .mixer import DEFAULT_CROSS_FADE, ClipMixer, MixerState

__all__ = ["PlayableAction", "ClipMixer", "MixerState", "DEFAULT_CROSS_FADE"]
