"""
Quaternion utility functions for rest-pose extraction and clip retargeting.

All quaternions are in (x, y, z, w) format, the same layout keyframe
tracks store their samples in. Every function accepts a single quaternion
of shape (4,) or an array of quaternions of shape (..., 4) and broadcasts
like numpy does.
"""

import numpy as np
from scipy.spatial.transform import Rotation as R


def quat_identity(count=None):
    """
    Identity quaternion (x, y, z, w format).

    Args:
        count: Optional number of identity quaternions to stack

    Returns:
        Array of shape (4,) or (count, 4)
    """
    q = np.array([0.0, 0.0, 0.0, 1.0])
    if count is None:
        return q
    return np.tile(q, (count, 1))


def quat_mul(q1, q2):
    """
    Multiply two quaternions or arrays of quaternions (x, y, z, w format).

    The product applies q2 first, then q1 (Hamilton convention).

    Args:
        q1: First quaternion(s), shape (..., 4)
        q2: Second quaternion(s), shape (..., 4)

    Returns:
        Product quaternion(s), shape (..., 4)
    """
    q1 = np.asarray(q1, dtype=np.float64)
    q2 = np.asarray(q2, dtype=np.float64)
    x1, y1, z1, w1 = q1[..., 0], q1[..., 1], q1[..., 2], q1[..., 3]
    x2, y2, z2, w2 = q2[..., 0], q2[..., 1], q2[..., 2], q2[..., 3]
    return np.stack([
        w1*x2 + x1*w2 + y1*z2 - z1*y2,
        w1*y2 - x1*z2 + y1*w2 + z1*x2,
        w1*z2 + x1*y2 - y1*x2 + z1*w2,
        w1*w2 - x1*x2 - y1*y2 - z1*z2,
    ], axis=-1)


def quat_conj(q):
    """
    Quaternion conjugate (x, y, z, w format).

    Args:
        q: Quaternion(s), shape (..., 4)

    Returns:
        Conjugate quaternion(s) (-x, -y, -z, w)
    """
    q = np.asarray(q, dtype=np.float64)
    return q * np.array([-1.0, -1.0, -1.0, 1.0])


def quat_inv(q):
    """
    Quaternion inverse. Equal to the conjugate for unit quaternions; the
    general form is kept so slightly denormalized rest poses stay exact.

    Args:
        q: Quaternion(s), shape (..., 4)

    Returns:
        Inverse quaternion(s)
    """
    q = np.asarray(q, dtype=np.float64)
    norm_sq = np.sum(q * q, axis=-1, keepdims=True)
    norm_sq = np.where(norm_sq < 1e-16, 1.0, norm_sq)
    return quat_conj(q) / norm_sq


def quat_normalize(q):
    """
    Normalize quaternion(s) (x, y, z, w format).

    Degenerate (near zero length) quaternions become identity.

    Args:
        q: Quaternion(s), shape (..., 4)

    Returns:
        Normalized quaternion(s)
    """
    q = np.asarray(q, dtype=np.float64)
    norm = np.linalg.norm(q, axis=-1, keepdims=True)
    degenerate = norm < 1e-8
    safe = np.where(degenerate, 1.0, norm)
    return np.where(degenerate, quat_identity(), q / safe)


def quat_dot(q1, q2):
    """Four-dimensional dot product, shape (...)."""
    return np.sum(np.asarray(q1, dtype=np.float64) * np.asarray(q2, dtype=np.float64), axis=-1)


def quat_angle(q1, q2):
    """
    Rotation angle in radians between two orientations, ignoring the
    q / -q double cover.

    Args:
        q1: First quaternion(s)
        q2: Second quaternion(s)

    Returns:
        Angle(s) in [0, pi]
    """
    d = np.clip(np.abs(quat_dot(quat_normalize(q1), quat_normalize(q2))), 0.0, 1.0)
    return 2.0 * np.arccos(d)


def quat_slerp(q0, q1, t):
    """
    Spherical linear interpolation along the shortest arc.

    Args:
        q0: Start quaternion(s), shape (..., 4)
        q1: End quaternion(s), shape (..., 4)
        t: Interpolation factor(s) in [0, 1], scalar or shape (...)

    Returns:
        Interpolated unit quaternion(s), shape (..., 4)
    """
    q0 = np.asarray(q0, dtype=np.float64)
    q1 = np.asarray(q1, dtype=np.float64)
    t = np.asarray(t, dtype=np.float64)[..., np.newaxis]

    dot = np.sum(q0 * q1, axis=-1, keepdims=True)
    # Take the shortest path around the hypersphere
    q1 = np.where(dot < 0.0, -q1, q1)
    dot = np.abs(dot)

    # Nearly parallel: fall back to normalized lerp
    close = dot > 0.9995
    theta = np.arccos(np.clip(dot, -1.0, 1.0))
    sin_theta = np.where(close, 1.0, np.sin(theta))
    s0 = np.where(close, 1.0 - t, np.sin((1.0 - t) * theta) / sin_theta)
    s1 = np.where(close, t, np.sin(t * theta) / sin_theta)
    return quat_normalize(s0 * q0 + s1 * q1)


def angle_axis_to_quat(angle, axis):
    """
    Converts from angle-axis representation to quaternion representation.

    Args:
        angle: angle(s) in radians
        axis: unit rotation axis, shape (..., 3)

    Returns:
        quaternion(s) in (x, y, z, w) format
    """
    angle = np.asarray(angle, dtype=np.float64)
    axis = np.asarray(axis, dtype=np.float64)
    c = np.cos(angle / 2.0)[..., np.newaxis]
    s = np.sin(angle / 2.0)[..., np.newaxis]
    return np.concatenate([s * axis, c], axis=-1)


def euler_to_quat(e, order='xyz', degrees=False):
    """
    Converts from euler representation to quaternion representation.

    Args:
        e: euler angles, shape (..., 3)
        order: scipy axis sequence (lowercase extrinsic, uppercase intrinsic)
        degrees: whether angles are in degrees

    Returns:
        quaternion(s) in (x, y, z, w) format
    """
    return R.from_euler(order, e, degrees=degrees).as_quat()


def as_quat_array(values):
    """
    View a flat (x, y, z, w, x, y, z, w, ...) sample buffer as (N, 4).

    Args:
        values: flat array whose length is a multiple of 4

    Returns:
        Array of shape (N, 4), float64
    """
    return np.asarray(values, dtype=np.float64).reshape(-1, 4)
