"""
Skeleton hierarchies and rest-pose extraction.

Example usage:
    from theatre_anim_sdk.skeleton import SkeletonNode, collect_rest_poses

    root = SkeletonNode.container("Armature")
    hips = root.add(SkeletonNode.bone("Hips"))
    rest = collect_rest_poses(root)
"""

from .hierarchy import NodeKind, SkeletonNode
from .pose_collector import AncestorAccumulation, PoseCollector, RestPoseSet, collect_rest_poses

__all__ = [
    "NodeKind",
    "SkeletonNode",
    "AncestorAccumulation",
    "PoseCollector",
    "RestPoseSet",
    "collect_rest_poses",
]
