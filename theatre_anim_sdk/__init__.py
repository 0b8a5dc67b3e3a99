"""
Theatre Animation SDK - Skeletal clip retargeting and playback.

This package re-expresses animation clips authored for one skeleton in the
bone space of another skeleton (different bone names and rest orientations)
and plays them back with timed cross-fades.

Main classes:
    - PoseCollector: Extracts local/world rest rotations from a hierarchy
    - BoneMap: Source -> target bone name correspondence
    - ClipRetargeter: Retargets rotation tracks between skeletons
    - ClipMixer: Per-actor clip library with cross-fade blending
    - Actor: Skeleton + rest pose + mixer facade

Example usage:
    from theatre_anim_sdk import Actor, UAL_TO_MIXAMO, find_clip

    # Hierarchies and clips come from an asset loader
    actor = Actor(mixamo_root)
    actor.load_animations(ual_root, ual_clips, bone_map=UAL_TO_MIXAMO)

    actor.play(find_clip(actor.clip_names, "idle"))

    # Main loop
    while running:
        actor.update(delta)
        pose = actor.pose()  # bone name -> (x, y, z, w) local rotation
"""

from .actor import Actor, find_clip
from .animation import ROTATION_PROPERTY, AnimationClip, KeyframeTrack, parse_track_name, sanitize_node_name
from .mixer import DEFAULT_CROSS_FADE, ClipMixer, MixerState, PlayableAction
from .retargeter import (
    UAL_TO_MIXAMO,
    BoneMap,
    ClipRetargeter,
    RetargetReport,
    TrackPolicy,
    load_bone_map,
    retarget_clip,
    retarget_clips,
)
from .skeleton import AncestorAccumulation, NodeKind, PoseCollector, RestPoseSet, SkeletonNode, collect_rest_poses

__version__ = "0.1.0"
__all__ = [
    "Actor",
    "find_clip",
    "ROTATION_PROPERTY",
    "AnimationClip",
    "KeyframeTrack",
    "parse_track_name",
    "sanitize_node_name",
    "DEFAULT_CROSS_FADE",
    "ClipMixer",
    "MixerState",
    "PlayableAction",
    "UAL_TO_MIXAMO",
    "BoneMap",
    "ClipRetargeter",
    "RetargetReport",
    "TrackPolicy",
    "load_bone_map",
    "retarget_clip",
    "retarget_clips",
    "AncestorAccumulation",
    "NodeKind",
    "PoseCollector",
    "RestPoseSet",
    "SkeletonNode",
    "collect_rest_poses",
]
