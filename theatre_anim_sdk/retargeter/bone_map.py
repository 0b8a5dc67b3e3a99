"""
Bone correspondence maps: source bone name -> target bone name.

Maps are immutable configuration values. Well-known rigs ship as JSON
presets next to this module and are exposed as named constants; the
retargeter never falls back to a preset on its own.
"""

import json
import logging
import pathlib
from collections.abc import Mapping

log = logging.getLogger("theatre_anim_sdk")


# Package paths
HERE = pathlib.Path(__file__).parent
BONE_MAP_ROOT = HERE / "bone_maps"

# Preset bone map paths
BONE_MAP_DICT = {
    "ual_to_mixamo": BONE_MAP_ROOT / "ual_to_mixamo.json",
}


class BoneMap(Mapping):
    """
    Partial mapping from source bone names to target bone names.

    Source bones without an entry are dropped during retargeting. The map
    does not have to be injective; when several source bones share one
    target the permissive default logs a warning, while
    allow_shared_targets=False rejects the map.

    Example:
        bone_map = BoneMap({"pelvis": "Hips", "spine_01": "Spine"})
        bone_map["pelvis"]  # "Hips"
    """

    def __init__(self, mapping, name="custom", root_bone=None, hip_bone=None, allow_shared_targets=True):
        """
        Args:
            mapping: Dict (or pairs) of source bone name -> target bone name
            name: Label used in logs and repr
            root_bone: Source root bone folded into hip_bone, if the rig has one
            hip_bone: Source hip/pelvis bone receiving the root bake
            allow_shared_targets: Accept several sources mapping to one target
        """
        self._mapping = dict(mapping)
        self.name = name
        self.root_bone = root_bone
        self.hip_bone = hip_bone

        for source, target in self._mapping.items():
            if not isinstance(source, str) or not isinstance(target, str) or not source or not target:
                raise ValueError(f"Bone map '{name}': entries must be non-empty strings, got {source!r} -> {target!r}")

        shared = self.shared_targets()
        if shared:
            details = ", ".join(f"{target} <- {sources}" for target, sources in shared.items())
            if not allow_shared_targets:
                raise ValueError(f"Bone map '{name}' maps several source bones to one target: {details}")
            log.warning("Bone map '%s' maps several source bones to one target: %s", name, details)

    @classmethod
    def identity(cls, names, name="identity"):
        """Map every name onto itself."""
        return cls({n: n for n in names}, name=name)

    @classmethod
    def from_json(cls, path, allow_shared_targets=True):
        """
        Load a bone map from a JSON file.

        The file holds either a flat {source: target} object, or an object
        with a "bones" table and optional "name", "root_bone" and
        "hip_bone" keys.
        """
        path = pathlib.Path(path)
        with open(path) as f:
            config = json.load(f)

        if "bones" in config:
            bones = config["bones"]
            name = config.get("name", path.stem)
            root_bone = config.get("root_bone")
            hip_bone = config.get("hip_bone")
        else:
            bones, name, root_bone, hip_bone = config, path.stem, None, None

        log.debug("Loaded bone map '%s' (%d entries) from %s", name, len(bones), path)
        return cls(bones, name=name, root_bone=root_bone, hip_bone=hip_bone,
                   allow_shared_targets=allow_shared_targets)

    def shared_targets(self):
        """
        Targets reached from more than one source bone.

        Returns:
            Dict mapping target bone name to the list of its source bones
        """
        by_target = {}
        for source, target in self._mapping.items():
            by_target.setdefault(target, []).append(source)
        return {target: sources for target, sources in by_target.items() if len(sources) > 1}

    @property
    def is_injective(self):
        return not self.shared_targets()

    def inverse(self):
        """
        Target -> source map.

        Raises:
            ValueError: If several source bones share a target
        """
        shared = self.shared_targets()
        if shared:
            raise ValueError(f"Bone map '{self.name}' is not invertible; shared targets: {sorted(shared)}")
        return BoneMap({t: s for s, t in self._mapping.items()}, name=f"{self.name}_inverse")

    def __getitem__(self, key):
        return self._mapping[key]

    def __iter__(self):
        return iter(self._mapping)

    def __len__(self):
        return len(self._mapping)

    def __repr__(self):
        return f"BoneMap({self.name!r}, {len(self)} entries)"


def load_bone_map(preset_name, allow_shared_targets=True):
    """
    Load one of the bundled preset bone maps.

    Args:
        preset_name: Key of BONE_MAP_DICT

    Returns:
        BoneMap
    """
    if preset_name not in BONE_MAP_DICT:
        raise ValueError(f"Unknown bone map preset: {preset_name}. "
                         f"Supported: {list(BONE_MAP_DICT.keys())}")
    return BoneMap.from_json(BONE_MAP_DICT[preset_name], allow_shared_targets=allow_shared_targets)


# Humanoid mapping from the Universal Animation Library rig to Mixamo rigs
UAL_TO_MIXAMO = load_bone_map("ual_to_mixamo")
