from __future__ import annotations

import pytest

from theatre_anim_sdk.skeleton import SkeletonNode

from .helpers import random_quat


@pytest.fixture
def identity_source_rig() -> SkeletonNode:
    """Scene -> pelvis -> spine_01 / hand_l, every rest rotation identity."""
    scene = SkeletonNode.container("Scene")
    pelvis = scene.add(SkeletonNode.bone("pelvis"))
    pelvis.add(SkeletonNode.bone("spine_01"))
    pelvis.add(SkeletonNode.bone("hand_l"))
    return scene


@pytest.fixture
def identity_target_rig() -> SkeletonNode:
    armature = SkeletonNode.container("Armature")
    hips = armature.add(SkeletonNode.bone("Hips"))
    hips.add(SkeletonNode.bone("Spine"))
    hips.add(SkeletonNode.bone("LeftHand"))
    return armature


@pytest.fixture
def rotated_rig() -> SkeletonNode:
    """
    Scene(A, container) -> hips(B) -> spine(C)
                                   -> Offset(D, container) -> hand(E)
    """
    scene = SkeletonNode.container("Scene", rotation=random_quat(1))
    hips = scene.add(SkeletonNode.bone("hips", rotation=random_quat(2)))
    hips.add(SkeletonNode.bone("spine", rotation=random_quat(3)))
    offset = hips.add(SkeletonNode.container("Offset", rotation=random_quat(4)))
    offset.add(SkeletonNode.bone("hand", rotation=random_quat(5)))
    return scene
