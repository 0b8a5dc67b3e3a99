"""
Rest-pose extraction from a bone hierarchy.

The collector walks a hierarchy once and records, per bone, its local rest
rotation and the rotation accumulated from the hierarchy root down to that
bone. Two accumulation strategies are supported because asset pipelines
disagree on whether wrapper nodes (armature objects, scene groups) carry
meaningful coordinate-system rotations.
"""

import enum
import logging
from types import MappingProxyType

import numpy as np

from ..utils.quat_utils import quat_identity, quat_inv, quat_mul

log = logging.getLogger("theatre_anim_sdk")


class AncestorAccumulation(enum.Enum):
    """
    How world rest rotations are accumulated.

    BONE_ONLY: only bone ancestors contribute; containers are transparent,
        so the result reflects bone-to-bone orientation independent of
        scene placement.
    FULL_CHAIN: every ancestor contributes, including containers and the
        hierarchy root node, capturing axis conversions baked into wrappers.
    """

    BONE_ONLY = "bone_only"
    FULL_CHAIN = "full_chain"


class RestPoseSet:
    """
    Local and world rest rotations keyed by bone name.

    Read-only after construction; safe to share across retarget calls.
    """

    def __init__(self, local, world, accumulation=AncestorAccumulation.BONE_ONLY):
        """
        Args:
            local: Dict mapping bone name to local rest quaternion (x, y, z, w)
            world: Dict mapping bone name to world rest quaternion (x, y, z, w)
            accumulation: Strategy that produced the world rotations
        """
        self.local = MappingProxyType({k: _frozen(v) for k, v in local.items()})
        self.world = MappingProxyType({k: _frozen(v) for k, v in world.items()})
        self.accumulation = AncestorAccumulation(accumulation)

    @classmethod
    def identity(cls, names, accumulation=AncestorAccumulation.BONE_ONLY):
        """Rest-pose set where every named bone has identity rest rotations."""
        names = list(names)
        return cls(
            {name: quat_identity() for name in names},
            {name: quat_identity() for name in names},
            accumulation,
        )

    @property
    def names(self):
        return list(self.local.keys())

    def __contains__(self, name):
        return name in self.local and name in self.world

    def __len__(self):
        return len(self.local)

    def local_rotation(self, name):
        return self.local.get(name)

    def world_rotation(self, name):
        return self.world.get(name)

    def parent_world_rotation(self, name):
        """
        World rotation of the frame a bone's local rotation is expressed in,
        W * inverse(R). None when the bone has no rest data.
        """
        if name not in self:
            return None
        return quat_mul(self.world[name], quat_inv(self.local[name]))

    def __repr__(self):
        return f"RestPoseSet({len(self)} bones, accumulation={self.accumulation.value})"


class PoseCollector:
    """
    Extracts a RestPoseSet from a hierarchy in a single iterative traversal.

    Example:
        collector = PoseCollector(AncestorAccumulation.FULL_CHAIN)
        rest = collector.collect(skeleton_root)
        rest.world["Hips"]
    """

    def __init__(self, accumulation=AncestorAccumulation.BONE_ONLY):
        self.accumulation = AncestorAccumulation(accumulation)

    def collect(self, root):
        """
        Walk the hierarchy below (and including) root.

        Args:
            root: SkeletonNode at the top of the hierarchy

        Returns:
            RestPoseSet for every bone reachable from root. A bone name seen
            more than once resolves to its last occurrence in pre-order.
        """
        full_chain = self.accumulation is AncestorAccumulation.FULL_CHAIN
        local = {}
        world = {}

        # (node, world rotation accumulated above this node)
        stack = [(root, quat_identity())]
        while stack:
            node, parent_world = stack.pop()

            if node.is_bone or full_chain:
                node_world = quat_mul(parent_world, node.rotation)
            else:
                node_world = parent_world

            if node.is_bone:
                if node.name in local:
                    log.warning("Duplicate bone name '%s' in rest pose; keeping last occurrence", node.name)
                local[node.name] = node.rotation.copy()
                world[node.name] = node_world

            for child in reversed(node.children):
                stack.append((child, node_world))

        log.debug("Collected rest pose for %d bones (%s)", len(local), self.accumulation.value)
        return RestPoseSet(local, world, self.accumulation)


def collect_rest_poses(root, accumulation=AncestorAccumulation.BONE_ONLY):
    """Shortcut for PoseCollector(accumulation).collect(root)."""
    return PoseCollector(accumulation).collect(root)


def _frozen(q):
    arr = np.array(q, dtype=np.float64)
    arr.flags.writeable = False
    return arr
