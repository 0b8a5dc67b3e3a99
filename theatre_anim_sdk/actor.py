"""
Actor - one skeleton, its rest pose and its clip mixer.

The actor is what a render loop drives: animations authored for other rigs
are retargeted onto the actor's skeleton when loaded, and each frame the
loop calls update(delta) and reads pose() for skinning.
"""

import logging

from .mixer.mixer import DEFAULT_CROSS_FADE, ClipMixer
from .retargeter.retargeter import ClipRetargeter
from .skeleton.pose_collector import AncestorAccumulation, collect_rest_poses

log = logging.getLogger("theatre_anim_sdk")


class Actor:
    """
    Animated character built from an already-parsed skeleton hierarchy.

    Example usage:
        actor = Actor(mixamo_root, clips=model_clips)
        actor.load_animations(ual_root, ual_clips, bone_map=UAL_TO_MIXAMO)

        actor.play(find_clip(actor.clip_names, "idle"))
        while running:
            actor.update(delta)
            pose = actor.pose()
    """

    def __init__(self, skeleton_root, clips=(), accumulation=AncestorAccumulation.BONE_ONLY):
        """
        Args:
            skeleton_root: SkeletonNode root of the actor's hierarchy
            clips: Clips already authored for this skeleton
            accumulation: AncestorAccumulation for rest-pose extraction
        """
        self.skeleton_root = skeleton_root.validate()
        self.accumulation = AncestorAccumulation(accumulation)
        self.rest_pose = collect_rest_poses(skeleton_root, self.accumulation)
        self.mixer = ClipMixer(clips)

    @property
    def clip_names(self):
        return self.mixer.clip_names

    def load_animations(self, source_root, clips, bone_map=None, **options):
        """
        Register clips authored for another skeleton.

        Args:
            source_root: SkeletonNode root the clips were authored for
            clips: Iterable of AnimationClip
            bone_map: Source -> actor bone names; None registers the clips
                unchanged
            **options: Forwarded to ClipRetargeter

        Returns:
            Names of the registered clips
        """
        clips = list(clips)
        if bone_map is not None:
            source_rest = collect_rest_poses(source_root, self.accumulation)
            retargeter = ClipRetargeter(bone_map, source_rest, self.rest_pose, **options)
            clips = retargeter.retarget_clips(clips)
        self.mixer.add_clips(clips)
        log.info("Loaded %d animations: %s", len(clips), [c.name for c in clips])
        return [clip.name for clip in clips]

    def add_clip(self, clip, name=None):
        self.mixer.add_clip(clip, name)

    def play(self, name):
        self.mixer.play(name)

    def cross_fade_to(self, name, duration=DEFAULT_CROSS_FADE):
        self.mixer.cross_fade_to(name, duration)

    def stop(self):
        self.mixer.stop()

    def update(self, delta):
        self.mixer.update(delta)

    def pose(self, bone_names=None):
        """
        Blended local rotation per bone, falling back to the actor's rest
        rotation for bones no active clip animates.

        Args:
            bone_names: Bones to resolve; defaults to every bone of the actor

        Returns:
            Dict mapping bone name to quaternion (x, y, z, w)
        """
        if bone_names is None:
            bone_names = self.skeleton_root.bone_names()
        return self.mixer.sample_pose(bone_names, rest=self.rest_pose)

    def dispose(self):
        self.mixer.dispose()


def find_clip(names, *keywords):
    """
    Pick a clip name by keyword, case-insensitively.

    Exact matches are tried for every keyword first, then substring matches,
    each in keyword order.

    Args:
        names: Available clip names
        *keywords: Lowercase keywords in priority order

    Returns:
        Matching clip name, or None
    """
    names = list(names)
    lower = [n.lower() for n in names]
    for keyword in keywords:
        if keyword in lower:
            return names[lower.index(keyword)]
    for keyword in keywords:
        for i, name in enumerate(lower):
            if keyword in name:
                return names[i]
    return None
