"""
ClipMixer - named clip library and cross-fade state machine for one actor.

States:
    STOPPED                              nothing plays
    PLAYING(current)                     one action at weight 1
    BLENDING(outgoing, current, t, d)    outgoing ramps 1 -> 0 while current
                                         ramps 0 -> 1, linear in t over d

Every operation is total: unknown names and redundant calls are no-ops.
"""

import enum
import logging

from ..utils.quat_utils import quat_identity, quat_slerp
from .action import PlayableAction

log = logging.getLogger("theatre_anim_sdk")


DEFAULT_CROSS_FADE = 0.4


class MixerState(enum.Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    BLENDING = "blending"


class ClipMixer:
    """
    Owns the playable actions of one actor and blends between them.

    Example:
        mixer = ClipMixer(clips)
        mixer.play("idle")

        # once per frame
        mixer.cross_fade_to("walk", 0.3)
        mixer.update(delta)
        pose = mixer.sample_pose(["Hips", "Spine"], rest=rest_pose)
    """

    def __init__(self, clips=()):
        self._actions = {}
        self._current = None
        self._outgoing = None
        self._fade_elapsed = 0.0
        self._fade_duration = 0.0
        self.add_clips(clips)

    def add_clip(self, clip, name=None):
        """
        Register a clip under name (default: the clip's own name).

        Re-registering an existing name replaces its action. When the
        replaced action is active, the new one takes over its clock, weight
        and role in the current play/blend state.
        """
        key = name if name is not None else clip.name
        action = PlayableAction(clip, name=key)

        previous = self._actions.get(key)
        if previous is not None and previous.is_running():
            action.time = min(previous.time, clip.duration)
            action.weight = previous.weight
            action.play()
            if previous is self._current:
                self._current = action
            if previous is self._outgoing:
                self._outgoing = action
            log.debug("Replaced active action '%s'", key)

        self._actions[key] = action
        return action

    def add_clips(self, clips):
        for clip in clips:
            self.add_clip(clip)

    def remove_clip(self, name):
        """
        Unregister an action. Removing the current action stops the mixer;
        removing the outgoing action ends the fade early.
        """
        action = self._actions.pop(name, None)
        if action is None:
            return
        if action is self._current:
            self.stop()
        elif action is self._outgoing:
            self._finish_fade()
        action.stop()

    @property
    def clip_names(self):
        return list(self._actions.keys())

    def action(self, name):
        """The PlayableAction registered under name, or None."""
        return self._actions.get(name)

    def __contains__(self, name):
        return name in self._actions

    @property
    def state(self):
        if self._current is None:
            return MixerState.STOPPED
        if self._outgoing is not None:
            return MixerState.BLENDING
        return MixerState.PLAYING

    @property
    def current(self):
        return self._current

    @property
    def outgoing(self):
        return self._outgoing

    @property
    def fade_elapsed(self):
        return self._fade_elapsed

    @property
    def fade_duration(self):
        return self._fade_duration

    @property
    def active_actions(self):
        """Running actions, outgoing first."""
        return [a for a in (self._outgoing, self._current) if a is not None]

    def weight_of(self, name):
        action = self._actions.get(name)
        return action.weight if action is not None else 0.0

    def play(self, name):
        """
        Switch to name immediately at full weight.

        No-op if name is unknown or already the current action (its clock
        keeps running). A call made during a fade ends it: both faded
        actions stop and name takes over without blending.
        """
        action = self._actions.get(name)
        if action is None:
            log.debug("play(%r): unknown clip", name)
            return
        if action is self._current:
            return

        self._stop_active()
        action.reset().play()
        action.weight = 1.0
        self._current = action
        log.debug("Playing '%s'", name)

    def cross_fade_to(self, name, duration=DEFAULT_CROSS_FADE):
        """
        Blend from the current action to name over duration seconds.

        The incoming action restarts at time 0. A call made while another
        fade is in flight keeps whichever of the two faded actions holds
        more weight (ties go to the action fading in) and fades out from it;
        the other one stops. Fading back to the action that was fading out
        restarts it from the other one. With nothing playing, name starts at
        full weight.
        """
        incoming = self._actions.get(name)
        if incoming is None:
            log.debug("cross_fade_to(%r): unknown clip", name)
            return
        if incoming is self._current:
            return

        if self._current is None:
            self.play(name)
            return

        candidates = [a for a in (self._current, self._outgoing) if a is not None and a is not incoming]
        outgoing = max(candidates, key=lambda a: a.weight)
        for action in candidates:
            if action is not outgoing:
                action.stop()

        outgoing.weight = 1.0
        incoming.reset().play()
        incoming.weight = 0.0

        self._outgoing = outgoing
        self._current = incoming
        self._fade_elapsed = 0.0
        self._fade_duration = max(0.0, float(duration))
        log.debug("Cross-fading '%s' -> '%s' over %.3fs", outgoing.name, incoming.name, self._fade_duration)

        if self._fade_duration == 0.0:
            self._finish_fade()

    def stop(self):
        """Halt every active action."""
        self._stop_active()
        log.debug("Mixer stopped")

    def update(self, delta):
        """
        Advance every active action's clock by delta seconds and progress an
        in-flight cross-fade, collapsing it once elapsed reaches duration.
        """
        for action in self.active_actions:
            action.advance(delta)

        if self._outgoing is None:
            return

        self._fade_elapsed = max(0.0, self._fade_elapsed + delta)
        if self._fade_elapsed >= self._fade_duration:
            self._finish_fade()
            return

        alpha = self._fade_elapsed / self._fade_duration
        self._current.weight = alpha
        self._outgoing.weight = 1.0 - alpha

    def dispose(self):
        """Stop everything and forget all registered clips."""
        self._stop_active()
        for action in self._actions.values():
            action.stop()
        self._actions.clear()

    def _finish_fade(self):
        if self._outgoing is not None:
            log.debug("Cross-fade to '%s' complete", self._current.name)
            self._outgoing.stop()
        self._outgoing = None
        self._fade_elapsed = 0.0
        self._fade_duration = 0.0
        if self._current is not None:
            self._current.weight = 1.0

    def _stop_active(self):
        for action in self.active_actions:
            action.stop()
        self._current = None
        self._outgoing = None
        self._fade_elapsed = 0.0
        self._fade_duration = 0.0

    def animated_bones(self):
        """Bone names animated by at least one active action."""
        names = []
        seen = set()
        for action in self.active_actions:
            for bone in action.bone_names:
                if bone not in seen:
                    seen.add(bone)
                    names.append(bone)
        return names

    def sample_bone(self, bone_name, rest=None):
        """
        Blended local rotation of one bone.

        Active actions are accumulated by weighted slerp. Weight missing up
        to 1 (during a fade, or when an action has no track for the bone)
        is filled with the bone's rest rotation.

        Args:
            bone_name: Bone to resolve
            rest: Optional RestPoseSet providing rest rotations

        Returns:
            Quaternion (x, y, z, w)
        """
        rest_rotation = None
        if rest is not None:
            rest_rotation = rest.local_rotation(bone_name)
        if rest_rotation is None:
            rest_rotation = quat_identity()

        accumulated = None
        total_weight = 0.0
        for action in self.active_actions:
            weight = action.weight
            if weight <= 0.0:
                continue
            q = action.sample(bone_name)
            if q is None:
                continue
            total_weight += weight
            if accumulated is None:
                accumulated = q
            else:
                accumulated = quat_slerp(accumulated, q, weight / total_weight)

        if accumulated is None:
            return rest_rotation.copy()
        if total_weight < 1.0:
            return quat_slerp(rest_rotation, accumulated, total_weight)
        return accumulated

    def sample_pose(self, bone_names=None, rest=None):
        """
        Blended local rotations for several bones.

        Args:
            bone_names: Bones to resolve; defaults to every animated bone
                plus every bone in rest
            rest: Optional RestPoseSet providing rest rotations

        Returns:
            Dict mapping bone name to quaternion (x, y, z, w)
        """
        if bone_names is None:
            bone_names = self.animated_bones()
            if rest is not None:
                animated = set(bone_names)
                bone_names += [name for name in rest.names if name not in animated]
        return {name: self.sample_bone(name, rest) for name in bone_names}
