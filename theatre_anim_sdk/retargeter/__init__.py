"""
Retargeter - Clip retargeting between skeletons with different bone naming
and rest orientation.

Example usage:
    from theatre_anim_sdk.retargeter import ClipRetargeter, UAL_TO_MIXAMO
    from theatre_anim_sdk.skeleton import collect_rest_poses

    retargeter = ClipRetargeter(
        UAL_TO_MIXAMO,
        collect_rest_poses(source_root),
        collect_rest_poses(target_root),
    )
    clips = retargeter.retarget_clips(source_clips)
"""

from .bone_map import BONE_MAP_DICT, UAL_TO_MIXAMO, BoneMap, load_bone_map
from .retargeter import (
    DEFAULT_HIP_BONE,
    DEFAULT_ROOT_BONE,
    ClipRetargeter,
    RetargetReport,
    TrackPolicy,
    retarget_clip,
    retarget_clips,
)

__all__ = [
    "BONE_MAP_DICT",
    "UAL_TO_MIXAMO",
    "BoneMap",
    "load_bone_map",
    "DEFAULT_HIP_BONE",
    "DEFAULT_ROOT_BONE",
    "ClipRetargeter",
    "RetargetReport",
    "TrackPolicy",
    "retarget_clip",
    "retarget_clips",
]
