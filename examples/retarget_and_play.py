#!/usr/bin/env python3
"""
Example: Retarget clips between two humanoid rigs and play them back.

This script builds a small Universal Animation Library style source rig and
a Mixamo style target rig with different rest orientations, retargets two
procedural clips ("Idle", "Walk") with the UAL_TO_MIXAMO preset, then ticks
the target actor at a fixed rate, cross-fading from Idle to Walk halfway.

Usage:
    python retarget_and_play.py --fps 30 --seconds 4
    python retarget_and_play.py --fade 0.25 --full_chain --verbose
"""

import argparse
import logging
import os
import sys

import numpy as np
from loop_rate_limiters import RateLimiter

# Allow running without installing the package (add project root to path)
_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _root not in sys.path:
    sys.path.insert(0, _root)

from theatre_anim_sdk import (
    UAL_TO_MIXAMO,
    Actor,
    AncestorAccumulation,
    AnimationClip,
    KeyframeTrack,
    SkeletonNode,
    find_clip,
)
from theatre_anim_sdk.utils import euler_to_quat


def build_source_rig():
    """UAL naming: root -> pelvis -> spine_01 / thigh_l, identity rests."""
    scene = SkeletonNode.container("Scene")
    root = scene.add(SkeletonNode.bone("root"))
    pelvis = root.add(SkeletonNode.bone("pelvis"))
    spine = pelvis.add(SkeletonNode.bone("spine_01"))
    spine.add(SkeletonNode.bone("Head"))
    pelvis.add(SkeletonNode.bone("thigh_l")).add(SkeletonNode.bone("calf_l"))
    return scene


def build_target_rig():
    """Mixamo naming, Y-up armature wrapper and rotated bone rests."""
    armature = SkeletonNode.container("Armature", rotation=euler_to_quat([90.0, 0.0, 0.0], degrees=True))
    hips = armature.add(SkeletonNode.bone("mixamorig:Hips"))
    spine = hips.add(SkeletonNode.bone("mixamorig:Spine", rotation=euler_to_quat([10.0, 0.0, 0.0], degrees=True)))
    spine.add(SkeletonNode.bone("mixamorig:Head"))
    thigh = hips.add(SkeletonNode.bone("mixamorig:LeftUpLeg", rotation=euler_to_quat([0.0, 0.0, 180.0], degrees=True)))
    thigh.add(SkeletonNode.bone("mixamorig:LeftLeg"))
    return armature


def build_source_clips(duration=1.0, keys=11):
    times = np.linspace(0.0, duration, keys)
    phase = 2.0 * np.pi * times / duration

    def swing(amplitude_deg, axis=0, offset=0.0):
        angles = np.zeros((keys, 3))
        angles[:, axis] = amplitude_deg * np.sin(phase + offset)
        return euler_to_quat(angles, degrees=True)

    idle = AnimationClip("Idle", duration, [
        KeyframeTrack.rotation("spine_01", times, swing(3.0)),
        KeyframeTrack.rotation("Head", times, swing(2.0, axis=1)),
    ])
    walk = AnimationClip("Walk", duration, [
        KeyframeTrack.rotation("root", times, swing(5.0, axis=2)),
        KeyframeTrack.rotation("pelvis", times, swing(4.0, axis=1)),
        KeyframeTrack.rotation("thigh_l", times, swing(30.0)),
        KeyframeTrack.rotation("calf_l", times, swing(20.0, offset=np.pi / 2)),
        # Not in the bone map: dropped by the retargeter
        KeyframeTrack.rotation("ik_foot_l", times, swing(10.0)),
    ])
    return [idle, walk]


def main():
    parser = argparse.ArgumentParser(description="Retarget UAL clips onto a Mixamo rig and play them")

    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Tick rate of the playback loop (default: 30)",
    )

    parser.add_argument(
        "--seconds",
        type=float,
        default=3.0,
        help="How long to play (default: 3.0)",
    )

    parser.add_argument(
        "--fade",
        type=float,
        default=0.4,
        help="Cross-fade duration in seconds (default: 0.4)",
    )

    parser.add_argument(
        "--full_chain",
        action="store_true",
        default=False,
        help="Accumulate world rest rotations through container nodes too",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(name)s] %(levelname)s %(message)s",
    )

    accumulation = AncestorAccumulation.FULL_CHAIN if args.full_chain else AncestorAccumulation.BONE_ONLY

    print(f"[Main] Building rigs ({accumulation.value} accumulation)...")
    actor = Actor(build_target_rig(), accumulation=accumulation)
    names = actor.load_animations(build_source_rig(), build_source_clips(), bone_map=UAL_TO_MIXAMO)
    print(f"[Main] Registered clips: {names}")

    idle = find_clip(actor.clip_names, "idle")
    walk = find_clip(actor.clip_names, "walk", "run")
    actor.play(idle)

    rate = RateLimiter(frequency=args.fps, warn=False)
    total_ticks = int(args.seconds * args.fps)
    switch_tick = total_ticks // 2

    try:
        for tick in range(total_ticks):
            if tick == switch_tick:
                print(f"[Main] Cross-fading {idle} -> {walk} over {args.fade:.2f}s")
                actor.cross_fade_to(walk, args.fade)

            actor.update(rate.dt)
            pose = actor.pose(["mixamorig:Hips", "mixamorig:LeftUpLeg"])

            if tick % max(1, args.fps // 4) == 0:
                hips = pose["mixamorig:Hips"]
                thigh = pose["mixamorig:LeftUpLeg"]
                print(f"[Tick {tick:4d}] state={actor.mixer.state.value:8s} "
                      f"{idle}={actor.mixer.weight_of(idle):.2f} {walk}={actor.mixer.weight_of(walk):.2f} "
                      f"hips=({hips[0]:6.3f}, {hips[1]:6.3f}, {hips[2]:6.3f}, {hips[3]:6.3f}) "
                      f"thigh=({thigh[0]:6.3f}, {thigh[1]:6.3f}, {thigh[2]:6.3f}, {thigh[3]:6.3f})")

            rate.sleep()
    except KeyboardInterrupt:
        print("\n[Main] Stopping...")
    finally:
        actor.dispose()
        print("[Main] Done")


if __name__ == "__main__":
    main()
