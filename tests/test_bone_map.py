"""Bone correspondence maps and bundled presets."""

from __future__ import annotations

import json

import pytest

from theatre_anim_sdk.retargeter import BONE_MAP_DICT, UAL_TO_MIXAMO, BoneMap, load_bone_map


class TestPreset:
    def test_ual_to_mixamo(self):
        assert len(UAL_TO_MIXAMO) == 52
        assert UAL_TO_MIXAMO["pelvis"] == "mixamorig:Hips"
        assert UAL_TO_MIXAMO["ball_r"] == "mixamorig:RightToeBase"
        assert UAL_TO_MIXAMO.root_bone == "root"
        assert UAL_TO_MIXAMO.hip_bone == "pelvis"
        assert UAL_TO_MIXAMO.is_injective

    def test_root_is_not_mapped(self):
        assert "root" not in UAL_TO_MIXAMO

    def test_every_preset_loads(self):
        for name in BONE_MAP_DICT:
            assert len(load_bone_map(name)) > 0

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown bone map preset"):
            load_bone_map("no_such_rig")

    def test_preset_is_immutable(self):
        with pytest.raises(TypeError):
            UAL_TO_MIXAMO["pelvis"] = "Hips"


class TestBoneMap:
    def test_mapping_protocol(self):
        bone_map = BoneMap({"pelvis": "Hips", "spine_01": "Spine"})
        assert bone_map.get("pelvis") == "Hips"
        assert bone_map.get("hand_l") is None
        assert sorted(bone_map) == ["pelvis", "spine_01"]
        assert bone_map == {"pelvis": "Hips", "spine_01": "Spine"}

    def test_source_dict_copied(self):
        source = {"pelvis": "Hips"}
        bone_map = BoneMap(source)
        source["pelvis"] = "Other"
        assert bone_map["pelvis"] == "Hips"

    def test_identity(self):
        bone_map = BoneMap.identity(["a", "b"])
        assert dict(bone_map) == {"a": "a", "b": "b"}

    def test_rejects_empty_names(self):
        with pytest.raises(ValueError, match="non-empty strings"):
            BoneMap({"pelvis": ""})

    def test_inverse(self):
        inverse = BoneMap({"pelvis": "Hips", "spine_01": "Spine"}).inverse()
        assert dict(inverse) == {"Hips": "pelvis", "Spine": "spine_01"}


class TestSharedTargets:
    MAPPING = {"spine_02": "Spine1", "spine_03": "Spine1", "pelvis": "Hips"}

    def test_permissive_by_default(self, caplog):
        with caplog.at_level("WARNING", logger="theatre_anim_sdk"):
            bone_map = BoneMap(self.MAPPING, name="lossy")
        assert len(bone_map) == 3
        assert not bone_map.is_injective
        assert "lossy" in caplog.text
        assert "Spine1" in caplog.text

    def test_shared_targets_listed(self):
        bone_map = BoneMap(self.MAPPING)
        assert bone_map.shared_targets() == {"Spine1": ["spine_02", "spine_03"]}

    def test_strict_mode_rejects(self):
        with pytest.raises(ValueError, match="Spine1"):
            BoneMap(self.MAPPING, allow_shared_targets=False)

    def test_inverse_rejects(self):
        with pytest.raises(ValueError, match="not invertible"):
            BoneMap(self.MAPPING).inverse()


class TestJson:
    def test_flat_file(self, tmp_path):
        path = tmp_path / "my_rig.json"
        path.write_text(json.dumps({"pelvis": "Hips"}))
        bone_map = BoneMap.from_json(path)
        assert bone_map.name == "my_rig"
        assert bone_map["pelvis"] == "Hips"
        assert bone_map.root_bone is None

    def test_structured_file(self, tmp_path):
        path = tmp_path / "rig.json"
        path.write_text(json.dumps({
            "name": "custom_rig",
            "root_bone": "Root",
            "hip_bone": "Pelvis",
            "bones": {"Pelvis": "Hips"},
        }))
        bone_map = BoneMap.from_json(path)
        assert bone_map.name == "custom_rig"
        assert bone_map.root_bone == "Root"
        assert bone_map.hip_bone == "Pelvis"
        assert dict(bone_map) == {"Pelvis": "Hips"}

    def test_strict_loading(self, tmp_path):
        path = tmp_path / "rig.json"
        path.write_text(json.dumps({"a": "X", "b": "X"}))
        with pytest.raises(ValueError):
            BoneMap.from_json(path, allow_shared_targets=False)
