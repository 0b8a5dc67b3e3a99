"""
ClipRetargeter: re-express rotation tracks authored for one skeleton in the
bone space of another skeleton.
"""

import enum
import logging

import numpy as np

from ..animation.clip import ROTATION_PROPERTY, AnimationClip, KeyframeTrack, parse_track_name, sanitize_node_name
from ..skeleton.pose_collector import AncestorAccumulation, collect_rest_poses
from ..utils.quat_utils import as_quat_array, quat_identity, quat_inv, quat_mul
from .bone_map import BoneMap

log = logging.getLogger("theatre_anim_sdk")


DEFAULT_ROOT_BONE = "root"
DEFAULT_HIP_BONE = "pelvis"


class TrackPolicy(enum.Enum):
    """
    What happens to tracks that are not retargetable rotation tracks.

    ROTATION_ONLY: only rotation tracks are emitted; everything else is dropped.
    PASS_THROUGH: non-rotation and unparseable tracks are copied unchanged,
        under their source names and whether or not their bone is mapped.
    """

    ROTATION_ONLY = "rotation_only"
    PASS_THROUGH = "pass_through"


class RetargetReport:
    """Per-clip bookkeeping of what happened to each input track."""

    def __init__(self, clip_name, input_tracks):
        self.clip_name = clip_name
        self.input_tracks = input_tracks
        self.retargeted = 0
        self.missing_rest = 0
        self.passed_through = 0
        self.dropped_unparseable = 0
        self.dropped_non_rotation = 0
        self.dropped_unmapped = 0
        self.unmapped_bones = set()

    @property
    def output_tracks(self):
        return self.retargeted + self.missing_rest + self.passed_through

    @property
    def dropped(self):
        return self.dropped_unparseable + self.dropped_non_rotation + self.dropped_unmapped

    def __repr__(self):
        return (f"RetargetReport({self.clip_name!r}: {self.output_tracks}/{self.input_tracks} tracks kept, "
                f"{self.missing_rest} without rest pose, {self.dropped_unmapped} unmapped)")


class ClipRetargeter:
    """
    Retargets animation clips from a source skeleton to a target skeleton.

    For a source bone with local rest R and world rest W, mapped onto a
    target bone with local rest Rt and world rest Wt, each rotation sample
    q becomes:

        out = inverse(Wt * inverse(Rt)) * (W * inverse(R)) * q * inverse(W) * Wt

    i.e. the rotation delta in the source bone's rest-oriented frame is
    carried into the target bone's rest-oriented frame, accounting for
    rest orientations of every ancestor on both sides.

    Example usage:
        source_rest = collect_rest_poses(source_root)
        target_rest = collect_rest_poses(target_root)
        retargeter = ClipRetargeter(UAL_TO_MIXAMO, source_rest, target_rest)

        walk = retargeter.retarget(source_walk)
        print(retargeter.report)
    """

    def __init__(
        self,
        bone_map,
        source_rest,
        target_rest=None,
        root_bone=None,
        hip_bone=None,
        track_policy=TrackPolicy.ROTATION_ONLY,
        sanitize_names=True,
    ):
        """
        Initialize the retargeter.

        Args:
            bone_map: BoneMap (or plain dict) of source -> target bone names
            source_rest: RestPoseSet of the skeleton the clips were authored for
            target_rest: RestPoseSet of the receiving skeleton; None treats
                every target bone as identity rest
            root_bone: Source root bone folded into the hip; defaults to the
                bone map's root_bone, else "root"
            hip_bone: Source hip bone receiving the root bake; defaults to the
                bone map's hip_bone, else "pelvis"
            track_policy: TrackPolicy for non-rotation tracks
            sanitize_names: Strip reserved characters from target bone names
                when building output track names
        """
        if not isinstance(bone_map, BoneMap):
            bone_map = BoneMap(bone_map)

        self.bone_map = bone_map
        self.source_rest = source_rest
        self.target_rest = target_rest
        self.root_bone = root_bone or bone_map.root_bone or DEFAULT_ROOT_BONE
        self.hip_bone = hip_bone or bone_map.hip_bone or DEFAULT_HIP_BONE
        self.track_policy = TrackPolicy(track_policy)
        self.sanitize_names = sanitize_names
        self.report = None

    def retarget(self, clip):
        """
        Retarget one clip.

        Never raises for unmapped bones, unparseable track names or missing
        rest data; inspect self.report afterwards for what was dropped.

        Args:
            clip: Source AnimationClip

        Returns:
            New AnimationClip with the same name and duration
        """
        report = RetargetReport(clip.name, len(clip.tracks))
        pass_through = self.track_policy is TrackPolicy.PASS_THROUGH

        root_track = None
        if self.root_bone != self.hip_bone:
            root_track = clip.find_track(self.root_bone, ROTATION_PROPERTY)

        tracks = []
        for track in clip.tracks:
            parsed = parse_track_name(track.name)
            if parsed is None:
                if pass_through:
                    tracks.append(track)
                    report.passed_through += 1
                else:
                    report.dropped_unparseable += 1
                    log.debug("[%s] Dropping unparseable track '%s'", clip.name, track.name)
                continue

            bone_name, _ = parsed
            if not track.is_rotation:
                if pass_through:
                    tracks.append(track)
                    report.passed_through += 1
                else:
                    report.dropped_non_rotation += 1
                continue

            target_bone = self.bone_map.get(bone_name)
            if target_bone is None:
                report.dropped_unmapped += 1
                report.unmapped_bones.add(bone_name)
                log.debug("[%s] Dropping track '%s': bone '%s' is not mapped", clip.name, track.name, bone_name)
                continue

            node_name = sanitize_node_name(target_bone) if self.sanitize_names else target_bone
            new_name = f"{node_name}.{ROTATION_PROPERTY}"
            if bone_name not in self.source_rest:
                # Lossy: samples stay in the source bone's frame
                log.debug("[%s] No rest pose for source bone '%s'; copying samples to '%s'",
                          clip.name, bone_name, new_name)
                tracks.append(track.renamed(new_name))
                report.missing_rest += 1
                continue

            tracks.append(self._retarget_rotation_track(track, bone_name, target_bone, new_name, root_track))
            report.retargeted += 1

        self.report = report
        log.debug("Retargeted clip %r", report)
        return AnimationClip(clip.name, clip.duration, tracks)

    def retarget_clips(self, clips):
        """Retarget a sequence of clips, preserving order."""
        result = [self.retarget(clip) for clip in clips]
        log.info("Retargeted %d clips with bone map '%s'", len(result), self.bone_map.name)
        return result

    def target_rest_rotations(self, target_bone):
        """
        (local, world) rest rotations of a target bone, identity when the
        target skeleton has no entry for it.
        """
        if self.target_rest is None or target_bone not in self.target_rest:
            return quat_identity(), quat_identity()
        return self.target_rest.local[target_bone], self.target_rest.world[target_bone]

    def _retarget_rotation_track(self, track, bone_name, target_bone, new_name, root_track):
        """Apply the rest-frame conjugation to every sample of one track."""
        samples = as_quat_array(track.values)
        local_rest = self.source_rest.local[bone_name]
        world_rest = self.source_rest.world[bone_name]

        # The target has no separate root bone, so root motion is folded into the hip
        if bone_name == self.hip_bone and root_track is not None:
            samples = quat_mul(self._root_samples(root_track, track.times), samples)
            root_local_rest = self.source_rest.local_rotation(self.root_bone)
            if root_local_rest is not None:
                local_rest = quat_mul(root_local_rest, local_rest)
            log.debug("Baked root track '%s' into '%s'", root_track.name, track.name)

        source_parent_world = quat_mul(world_rest, quat_inv(local_rest))
        target_local_rest, target_world_rest = self.target_rest_rotations(target_bone)
        target_parent_world = quat_mul(target_world_rest, quat_inv(target_local_rest))

        pre = quat_mul(quat_inv(target_parent_world), source_parent_world)
        post = quat_mul(quat_inv(world_rest), target_world_rest)
        values = quat_mul(pre, quat_mul(samples, post))

        return KeyframeTrack(new_name, track.times, values.reshape(-1), value_size=4)

    @staticmethod
    def _root_samples(root_track, times):
        """Root rotations at the given key times, slerped when keys differ."""
        if root_track.keyframe_count == len(times) and np.array_equal(root_track.times, times):
            return as_quat_array(root_track.values)
        return root_track.sample_many(times)


def retarget_clip(clip, bone_map, source_rest, target_rest=None, **options):
    """
    Retarget a single clip.

    Args:
        clip: Source AnimationClip
        bone_map: Source -> target bone names
        source_rest: RestPoseSet of the source skeleton
        target_rest: RestPoseSet of the target skeleton (None = identity rest)
        **options: Forwarded to ClipRetargeter

    Returns:
        Retargeted AnimationClip
    """
    return ClipRetargeter(bone_map, source_rest, target_rest, **options).retarget(clip)


def retarget_clips(clips, bone_map, source_root, target_root=None,
                   accumulation=AncestorAccumulation.BONE_ONLY, **options):
    """
    Collect rest poses for both hierarchies and retarget every clip.

    Args:
        clips: Iterable of source AnimationClip
        bone_map: Source -> target bone names
        source_root: SkeletonNode root of the source hierarchy
        target_root: SkeletonNode root of the target hierarchy; None treats
            the target as identity rest
        accumulation: AncestorAccumulation used for both hierarchies
        **options: Forwarded to ClipRetargeter

    Returns:
        List of retargeted clips
    """
    source_rest = collect_rest_poses(source_root, accumulation)
    target_rest = collect_rest_poses(target_root, accumulation) if target_root is not None else None
    return ClipRetargeter(bone_map, source_rest, target_rest, **options).retarget_clips(clips)
