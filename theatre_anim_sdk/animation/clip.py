"""
Keyframe tracks and animation clips.

A track animates one property of one scene node and is named
"<node>.<property>", e.g. "Hips.quaternion". Rotation tracks store one
(x, y, z, w) quaternion per keyframe in a flat value buffer. Tracks and
clips are immutable value objects and can be shared between mixers.
"""

import re

import numpy as np

from ..utils.quat_utils import quat_slerp

ROTATION_PROPERTY = "quaternion"

# Characters the scene-graph binding treats as path separators
_RESERVED_RE = re.compile(r"[\[\]\.:/]")
_WHITESPACE_RE = re.compile(r"\s")


def parse_track_name(track_name):
    """
    Split a track name into (node name, property) at the first dot.

    Returns:
        Tuple (node, property), or None if the name has no dot
    """
    node, sep, prop = track_name.partition(".")
    if not sep:
        return None
    return node, prop


def sanitize_node_name(name):
    """
    Make a node name safe to use in a track name.

    Whitespace becomes "_" and the reserved characters [ ] . : / are
    removed, so "mixamorig:Hips" becomes "mixamorigHips".
    """
    return _RESERVED_RE.sub("", _WHITESPACE_RE.sub("_", name))


class KeyframeTrack:
    """
    A named, time-sampled signal for one property of one node.

    Args:
        name: Track name "<node>.<property>"
        times: Keyframe times in seconds, non-decreasing
        values: Flat value buffer, len(times) * value_size entries
        value_size: Components per keyframe (4 for quaternions)
    """

    def __init__(self, name, times, values, value_size=4):
        times = np.array(times, dtype=np.float64)
        values = np.array(values, dtype=np.float64).reshape(-1)

        if times.ndim != 1:
            raise ValueError(f"Track '{name}': times must be one-dimensional, got shape {times.shape}")
        if len(times) == 0:
            raise ValueError(f"Track '{name}' has no keyframes")
        if np.any(np.diff(times) < 0):
            raise ValueError(f"Track '{name}': times must be non-decreasing")
        if value_size < 1 or len(values) != len(times) * value_size:
            raise ValueError(
                f"Track '{name}': expected {len(times) * value_size} values "
                f"({len(times)} keyframes x {value_size}), got {len(values)}"
            )

        times.flags.writeable = False
        values.flags.writeable = False

        self.name = name
        self.times = times
        self.values = values
        self.value_size = value_size

    @classmethod
    def rotation(cls, node_name, times, quats):
        """Build a quaternion track for node_name from (N, 4) quaternions."""
        return cls(f"{node_name}.{ROTATION_PROPERTY}", times, np.asarray(quats).reshape(-1), value_size=4)

    @property
    def bone_name(self):
        parsed = parse_track_name(self.name)
        return parsed[0] if parsed else None

    @property
    def property_name(self):
        parsed = parse_track_name(self.name)
        return parsed[1] if parsed else None

    @property
    def is_rotation(self):
        return self.property_name == ROTATION_PROPERTY and self.value_size == 4

    @property
    def keyframe_count(self):
        return len(self.times)

    @property
    def end_time(self):
        return float(self.times[-1])

    def value_at(self, index):
        """Value of keyframe index."""
        start = index * self.value_size
        return self.values[start:start + self.value_size].copy()

    def renamed(self, name):
        """Same keyframes under a different track name."""
        return KeyframeTrack(name, self.times, self.values, self.value_size)

    def sample(self, t):
        """
        Evaluate the track at time t.

        Times outside the keyed range clamp to the first/last keyframe.
        Quaternion tracks interpolate with shortest-arc slerp, all other
        tracks linearly.
        """
        times = self.times
        idx = int(np.searchsorted(times, t, side="right"))
        if idx == 0:
            return self.value_at(0)
        if idx >= len(times):
            return self.value_at(len(times) - 1)

        t0, t1 = times[idx - 1], times[idx]
        alpha = (t - t0) / (t1 - t0)
        v0 = self.value_at(idx - 1)
        v1 = self.value_at(idx)
        if self.is_rotation:
            return quat_slerp(v0, v1, alpha)
        return v0 + (v1 - v0) * alpha

    def sample_many(self, sample_times):
        """Evaluate the track at every time in sample_times, shape (N, value_size)."""
        return np.array([self.sample(t) for t in sample_times]).reshape(-1, self.value_size)

    def __repr__(self):
        return f"KeyframeTrack({self.name!r}, keyframes={self.keyframe_count})"


class AnimationClip:
    """
    A named set of keyframe tracks with a duration.

    Args:
        name: Clip name
        duration: Clip length in seconds; None or negative computes it
            from the longest track
        tracks: Iterable of KeyframeTrack
    """

    def __init__(self, name, duration=None, tracks=()):
        self.name = name
        self.tracks = tuple(tracks)
        if duration is None or duration < 0:
            duration = max((track.end_time for track in self.tracks), default=0.0)
        self.duration = float(duration)

    @property
    def track_names(self):
        return [track.name for track in self.tracks]

    def rotation_tracks(self):
        return [track for track in self.tracks if track.is_rotation]

    def find_track(self, node_name, property_name=ROTATION_PROPERTY):
        """First track animating node_name.property_name, or None."""
        for track in self.tracks:
            if parse_track_name(track.name) == (node_name, property_name):
                return track
        return None

    def with_tracks(self, tracks):
        """Copy of this clip with a different track set."""
        return AnimationClip(self.name, self.duration, tracks)

    def __repr__(self):
        return f"AnimationClip({self.name!r}, duration={self.duration:.3f}, tracks={len(self.tracks)})"
