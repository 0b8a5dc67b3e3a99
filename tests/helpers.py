"""Shared builders for the test suite."""

from __future__ import annotations

import numpy as np

from theatre_anim_sdk.animation import AnimationClip, KeyframeTrack


def random_quats(count: int, seed: int) -> np.ndarray:
    """(count, 4) random unit quaternions, (x, y, z, w)."""
    q = np.random.default_rng(seed).normal(size=(count, 4))
    return q / np.linalg.norm(q, axis=-1, keepdims=True)


def random_quat(seed: int) -> np.ndarray:
    return random_quats(1, seed)[0]


def constant_clip(name: str, bone: str, quat, duration: float = 1.0) -> AnimationClip:
    """Clip holding one bone at a fixed rotation."""
    quat = np.asarray(quat, dtype=float)
    return AnimationClip(name, duration, [KeyframeTrack.rotation(bone, [0.0, duration], [quat, quat])])


def same_rotation(a, b, atol: float = 1e-9) -> bool:
    """Equal up to the q / -q double cover."""
    return abs(abs(float(np.dot(a, b))) - 1.0) < atol
