"""
PlayableAction: one clip bound to one mixer, with its own clock and weight.
"""

from ..animation.clip import sanitize_node_name


class PlayableAction:
    """
    Playback state of a single clip inside a ClipMixer.

    Actions are created by the mixer when a clip is registered and live as
    long as the mixer does.
    """

    def __init__(self, clip, name=None, loop=True, time_scale=1.0):
        """
        Args:
            clip: AnimationClip to play
            name: Registration name (defaults to the clip name)
            loop: Wrap the clock around the clip duration
            time_scale: Clock multiplier applied in advance()
        """
        self.clip = clip
        self.name = name if name is not None else clip.name
        self.loop = loop
        self.time_scale = time_scale
        self.time = 0.0
        self.weight = 0.0
        self.enabled = False

        # Rotation track per bone; the last track for a bone wins
        self._rotation_tracks = {}
        for track in clip.rotation_tracks():
            self._rotation_tracks[track.bone_name] = track

    @property
    def duration(self):
        return self.clip.duration

    @property
    def bone_names(self):
        return list(self._rotation_tracks.keys())

    def is_running(self):
        return self.enabled

    def reset(self):
        """Rewind the clock to the start of the clip."""
        self.time = 0.0
        return self

    def play(self):
        self.enabled = True
        return self

    def stop(self):
        """Halt playback: weight 0 and clock rewound."""
        self.enabled = False
        self.weight = 0.0
        self.time = 0.0
        return self

    def advance(self, delta):
        """
        Advance the local clock by delta seconds (scaled by time_scale).

        Looping actions wrap into [0, duration); others clamp to
        [0, duration].
        """
        if not self.enabled:
            return self.time

        duration = self.duration
        if duration <= 0.0:
            self.time = 0.0
            return self.time

        t = self.time + delta * self.time_scale
        if self.loop:
            t %= duration
        else:
            t = min(max(t, 0.0), duration)
        self.time = t
        return self.time

    def sample(self, bone_name):
        """
        Local rotation of bone_name at the current time, or None if not
        animated. Tracks named after the sanitized bone name also bind, so
        "mixamorig:Hips" resolves a "mixamorigHips.quaternion" track.
        """
        track = self._rotation_tracks.get(bone_name)
        if track is None:
            track = self._rotation_tracks.get(sanitize_node_name(bone_name))
        if track is None:
            return None
        return track.sample(self.time)

    def __repr__(self):
        return (f"PlayableAction({self.name!r}, time={self.time:.3f}, weight={self.weight:.3f}, "
                f"enabled={self.enabled})")
