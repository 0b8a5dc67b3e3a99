"""
Utility functions for rest-pose extraction, retargeting and blending.

This module provides:
    - quat_utils: Quaternion math utilities, (x, y, z, w) layout
"""

from .quat_utils import (
    quat_identity,
    quat_mul,
    quat_conj,
    quat_inv,
    quat_normalize,
    quat_dot,
    quat_angle,
    quat_slerp,
    angle_axis_to_quat,
    euler_to_quat,
    as_quat_array,
)

__all__ = [
    "quat_identity",
    "quat_mul",
    "quat_conj",
    "quat_inv",
    "quat_normalize",
    "quat_dot",
    "quat_angle",
    "quat_slerp",
    "angle_axis_to_quat",
    "euler_to_quat",
    "as_quat_array",
]
