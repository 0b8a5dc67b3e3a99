"""
Skeleton hierarchy nodes.

A hierarchy is a tree of named nodes. Each node is either a bone or a
container (armature object, scene group, ...); both carry a local rotation
quaternion in (x, y, z, w) format. Asset loaders build these trees from
whatever scene format they decode.
"""

import enum

import numpy as np

from ..utils.quat_utils import quat_identity


class NodeKind(enum.Enum):
    """Tag of a hierarchy node."""

    BONE = "bone"
    CONTAINER = "container"


class SkeletonNode:
    """
    One node of a bone hierarchy.

    Example:
        root = SkeletonNode.container("Armature", rotation=[0.7071, 0, 0, 0.7071])
        hips = root.add(SkeletonNode.bone("Hips"))
        spine = hips.add(SkeletonNode.bone("Spine", rotation=[0, 0, 0.1, 0.995]))
    """

    def __init__(self, name, rotation=None, kind=NodeKind.BONE, children=None):
        """
        Args:
            name: Node name (unique among bones of one hierarchy)
            rotation: Local rotation quaternion (x, y, z, w), identity if None
            kind: NodeKind.BONE or NodeKind.CONTAINER
            children: Optional iterable of child nodes
        """
        if rotation is None:
            rotation = quat_identity()
        rotation = np.array(rotation, dtype=np.float64)
        if rotation.shape != (4,):
            raise ValueError(f"Node '{name}' rotation must have 4 components, got shape {rotation.shape}")
        rotation.flags.writeable = False

        self.name = name
        self.rotation = rotation
        self.kind = NodeKind(kind)
        self.children = list(children) if children is not None else []

    @classmethod
    def bone(cls, name, rotation=None, children=None):
        """Create a bone node."""
        return cls(name, rotation=rotation, kind=NodeKind.BONE, children=children)

    @classmethod
    def container(cls, name, rotation=None, children=None):
        """Create a non-bone container node."""
        return cls(name, rotation=rotation, kind=NodeKind.CONTAINER, children=children)

    @property
    def is_bone(self):
        return self.kind is NodeKind.BONE

    def add(self, child):
        """Append a child node and return it, so chains read top-down."""
        self.children.append(child)
        return child

    def iter_nodes(self):
        """
        Iterate over this node and all descendants, depth-first pre-order.

        Children are visited in their declared order. Uses an explicit
        stack so deep rigs never hit the recursion limit.
        """
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_bones(self):
        """Iterate over bone nodes only, in traversal order."""
        return (node for node in self.iter_nodes() if node.is_bone)

    def bone_names(self):
        return [node.name for node in self.iter_bones()]

    def find(self, name):
        """Return the first node with the given name, or None."""
        for node in self.iter_nodes():
            if node.name == name:
                return node
        return None

    def validate(self):
        """
        Check the hierarchy is a proper tree with unique bone names.

        Raises:
            ValueError: If a node is reachable twice (cycle or shared child)
                or two bones share a name.
        """
        seen_nodes = set()
        seen_bones = set()
        stack = [self]
        while stack:
            node = stack.pop()
            if id(node) in seen_nodes:
                raise ValueError(f"Node '{node.name}' is reachable more than once; hierarchy is not a tree")
            seen_nodes.add(id(node))
            if node.is_bone:
                if node.name in seen_bones:
                    raise ValueError(f"Duplicate bone name '{node.name}'")
                seen_bones.add(node.name)
            stack.extend(node.children)
        return self

    def __repr__(self):
        return f"SkeletonNode({self.name!r}, kind={self.kind.value}, children={len(self.children)})"
