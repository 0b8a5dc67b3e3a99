"""Keyframe tracks, clips and track-name helpers."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.testing import assert_allclose

from theatre_anim_sdk.animation import (
    ROTATION_PROPERTY,
    AnimationClip,
    KeyframeTrack,
    parse_track_name,
    sanitize_node_name,
)
from theatre_anim_sdk.utils.quat_utils import angle_axis_to_quat, quat_identity

Z = [0.0, 0.0, 1.0]


class TestTrackNames:
    def test_parse(self):
        assert parse_track_name("Hips.quaternion") == ("Hips", "quaternion")

    def test_parse_splits_at_first_dot(self):
        assert parse_track_name("Hips.morphTargetInfluences.smile") == ("Hips", "morphTargetInfluences.smile")

    def test_parse_without_dot(self):
        assert parse_track_name("Hips") is None

    def test_sanitize_mixamo_prefix(self):
        assert sanitize_node_name("mixamorig:Hips") == "mixamorigHips"

    def test_sanitize_whitespace_and_reserved(self):
        assert sanitize_node_name("Left Arm") == "Left_Arm"
        assert sanitize_node_name("a[0]/b.c") == "a0bc"

    def test_sanitize_plain_name_unchanged(self):
        assert sanitize_node_name("spine_01") == "spine_01"


class TestKeyframeTrackValidation:
    def test_value_count_mismatch(self):
        with pytest.raises(ValueError, match="expected 8 values"):
            KeyframeTrack("Hips.quaternion", [0.0, 1.0], [0.0, 0.0, 0.0, 1.0])

    def test_decreasing_times(self):
        with pytest.raises(ValueError, match="non-decreasing"):
            KeyframeTrack("Hips.quaternion", [1.0, 0.0], quat_identity(2))

    def test_empty(self):
        with pytest.raises(ValueError, match="no keyframes"):
            KeyframeTrack("Hips.quaternion", [], [])

    def test_repeated_times_allowed(self):
        track = KeyframeTrack("Hips.quaternion", [0.0, 1.0, 1.0], quat_identity(3))
        assert track.keyframe_count == 3

    def test_arrays_are_read_only(self):
        track = KeyframeTrack("Hips.quaternion", [0.0], quat_identity())
        with pytest.raises(ValueError):
            track.values[0] = 1.0
        with pytest.raises(ValueError):
            track.times[0] = 1.0


class TestKeyframeTrack:
    def test_rotation_factory(self):
        track = KeyframeTrack.rotation("Hips", [0.0, 1.0], quat_identity(2))
        assert track.name == "Hips.quaternion"
        assert track.bone_name == "Hips"
        assert track.property_name == ROTATION_PROPERTY
        assert track.is_rotation
        assert track.values.shape == (8,)

    def test_position_track_is_not_rotation(self):
        track = KeyframeTrack("Hips.position", [0.0], [0.0, 1.0, 0.0], value_size=3)
        assert not track.is_rotation

    def test_value_at(self):
        q = angle_axis_to_quat(0.3, Z)
        track = KeyframeTrack.rotation("Hips", [0.0, 1.0], [quat_identity(), q])
        assert_allclose(track.value_at(1), q)

    def test_sample_clamps(self):
        q = angle_axis_to_quat(0.3, Z)
        track = KeyframeTrack.rotation("Hips", [0.5, 1.0], [quat_identity(), q])
        assert_allclose(track.sample(-1.0), quat_identity())
        assert_allclose(track.sample(0.0), quat_identity())
        assert_allclose(track.sample(5.0), q)

    def test_sample_slerps_rotation(self):
        track = KeyframeTrack.rotation("Hips", [0.0, 2.0], [quat_identity(), angle_axis_to_quat(np.pi / 2, Z)])
        assert_allclose(track.sample(1.0), angle_axis_to_quat(np.pi / 4, Z), atol=1e-12)

    def test_sample_lerps_other_tracks(self):
        track = KeyframeTrack("Hips.position", [0.0, 1.0], [0.0, 0.0, 0.0, 2.0, 4.0, 6.0], value_size=3)
        assert_allclose(track.sample(0.25), [0.5, 1.0, 1.5])

    def test_sample_at_repeated_time_takes_later_key(self):
        q1 = angle_axis_to_quat(0.5, Z)
        q2 = angle_axis_to_quat(1.0, Z)
        track = KeyframeTrack.rotation("Hips", [0.0, 1.0, 1.0, 2.0], [quat_identity(), q1, q2, q2])
        assert_allclose(track.sample(1.0), q2, atol=1e-12)

    def test_sample_many(self):
        track = KeyframeTrack.rotation("Hips", [0.0, 1.0], [quat_identity(), angle_axis_to_quat(1.0, Z)])
        out = track.sample_many([0.0, 0.5, 1.0])
        assert out.shape == (3, 4)
        assert_allclose(out[1], angle_axis_to_quat(0.5, Z), atol=1e-12)

    def test_renamed_shares_keyframes(self):
        track = KeyframeTrack.rotation("pelvis", [0.0, 1.0], quat_identity(2))
        renamed = track.renamed("Hips.quaternion")
        assert renamed.name == "Hips.quaternion"
        assert np.array_equal(renamed.values, track.values)
        assert track.name == "pelvis.quaternion"


class TestAnimationClip:
    def test_duration_from_tracks(self):
        clip = AnimationClip("walk", tracks=[
            KeyframeTrack.rotation("a", [0.0, 0.8], quat_identity(2)),
            KeyframeTrack.rotation("b", [0.0, 1.2], quat_identity(2)),
        ])
        assert clip.duration == pytest.approx(1.2)

    def test_negative_duration_is_computed(self):
        clip = AnimationClip("walk", -1, [KeyframeTrack.rotation("a", [0.0, 0.5], quat_identity(2))])
        assert clip.duration == pytest.approx(0.5)

    def test_empty_clip(self):
        clip = AnimationClip("empty")
        assert clip.duration == 0.0
        assert clip.tracks == ()

    def test_find_track(self):
        position = KeyframeTrack("a.position", [0.0], [0.0, 0.0, 0.0], value_size=3)
        rotation = KeyframeTrack.rotation("a", [0.0], quat_identity())
        clip = AnimationClip("c", 1.0, [position, rotation])
        assert clip.find_track("a") is rotation
        assert clip.find_track("a", "position") is position
        assert clip.find_track("b") is None

    def test_rotation_tracks(self):
        position = KeyframeTrack("a.position", [0.0], [0.0, 0.0, 0.0], value_size=3)
        rotation = KeyframeTrack.rotation("a", [0.0], quat_identity())
        clip = AnimationClip("c", 1.0, [position, rotation])
        assert clip.rotation_tracks() == [rotation]
        assert clip.track_names == ["a.position", "a.quaternion"]

    def test_with_tracks_keeps_name_and_duration(self):
        clip = AnimationClip("c", 3.0, [KeyframeTrack.rotation("a", [0.0], quat_identity())])
        copy = clip.with_tracks([])
        assert copy.name == "c"
        assert copy.duration == 3.0
        assert copy.tracks == ()
