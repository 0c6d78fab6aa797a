"""
Texture-transform animation clips

Each keyframe group of a track becomes its own curve segment. Groups are
separate time ranges (or discontinuities), so a curve never blends from the
last key of one segment into the first key of the next: between segments it
holds the earlier segment's last value.

Timestamps are milliseconds; curve times are seconds.
"""

import logging
from pathlib import Path
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from wowunity.exceptions import AnimationBuildError
from wowunity.schema import M2Metadata, MultiValueTrack, TextureTransform, Interpolation

logger = logging.getLogger(__name__)

MILLISECONDS_PER_SECOND = 1000.0
AXES = "xyzw"
TRACK_PROPERTIES = ('translation', 'rotation', 'scaling')


class Keyframe(BaseModel):
    time: float
    value: float


class CurveSegment(BaseModel):
    keys: List[Keyframe] = Field(default_factory=list)

    @property
    def start(self) -> float:
        return self.keys[0].time

    @property
    def end(self) -> float:
        return self.keys[-1].time


class AnimationCurve(BaseModel):
    """One animated scalar, e.g. the x component of the translation track."""
    path: str = Field(..., description="Animated property path, e.g. 'translation.x'.")
    interpolation: Literal['step', 'linear'] = 'linear'
    segments: List[CurveSegment] = Field(default_factory=list)

    @property
    def keys(self) -> List[Keyframe]:
        return [key for segment in self.segments for key in segment.keys]

    def evaluate(self, time: float) -> float:
        """
        Curve value at `time` (seconds).

        Inside a segment: step or linear interpolation between its keys.
        Before the first segment: first value. Between segments or after the
        last one: last value of the preceding segment.
        """
        if not self.segments:
            raise ValueError(f"Curve '{self.path}' has no keys")

        if time <= self.segments[0].start:
            return self.segments[0].keys[0].value

        previous = self.segments[0]
        for segment in self.segments:
            if time < segment.start:
                return previous.keys[-1].value
            if time <= segment.end:
                return self._evaluate_segment(segment, time)
            previous = segment
        return previous.keys[-1].value

    def _evaluate_segment(self, segment: CurveSegment, time: float) -> float:
        keys = segment.keys
        for a, b in zip(keys, keys[1:]):
            if a.time <= time < b.time:
                if self.interpolation == 'step':
                    return a.value
                t = (time - a.time) / (b.time - a.time)
                return a.value + (b.value - a.value) * t
        return keys[-1].value


class AnimationClip(BaseModel):
    name: str
    curves: List[AnimationCurve] = Field(default_factory=list)

    @property
    def length(self) -> float:
        ends = [segment.end for curve in self.curves for segment in curve.segments]
        return max(ends) if ends else 0.0

    def get_curve(self, path: str) -> Optional[AnimationCurve]:
        return next((c for c in self.curves if c.path == path), None)


def build_curve(track: MultiValueTrack, path: str, component: int) -> AnimationCurve:
    """
    Curve for one vector component of a track.

    Raises:
        AnimationBuildError: If the track shape is inconsistent, a vector has
                             no such component, timestamps go backwards or
                             a group starts before the previous one ends
    """
    track.check_shape()
    interpolation = 'step' if track.interpolation == Interpolation.NONE else 'linear'
    curve = AnimationCurve(path=path, interpolation=interpolation)

    for g, (times, values) in enumerate(zip(track.timestamps, track.values)):
        if not times:
            continue
        keys = []
        previous_time = None
        for timestamp, vector in zip(times, values):
            if component >= len(vector):
                raise AnimationBuildError(
                    f"{path}: group {g} vector {vector} has no component {component}"
                )
            time = timestamp / MILLISECONDS_PER_SECOND
            if previous_time is not None and time < previous_time:
                raise AnimationBuildError(f"{path}: group {g} timestamps are not ascending")
            keys.append(Keyframe(time=time, value=vector[component]))
            previous_time = time
        if curve.segments and keys[0].time < curve.segments[-1].end:
            raise AnimationBuildError(f"{path}: group {g} starts before the previous group ends")
        curve.segments.append(CurveSegment(keys=keys))

    return curve


def track_component_count(track: MultiValueTrack) -> int:
    for group in track.values:
        if group:
            return min(len(group[0]), len(AXES))
    return 0


def create_animation_clip(transform: TextureTransform, name: str = "") -> AnimationClip:
    """
    Clip with one curve per animated component of a texture transform.

    Translation is always converted; rotation and scaling only when they
    carry keyframes.

    Raises:
        AnimationBuildError: If any populated track cannot be converted
    """
    clip = AnimationClip(name=name)
    for track_name in TRACK_PROPERTIES:
        track: MultiValueTrack = getattr(transform, track_name)
        if track_name != 'translation' and not track.has_keyframes():
            continue
        track.check_shape()
        for component in range(track_component_count(track)):
            clip.curves.append(build_curve(track, f"{track_name}.{AXES[component]}", component))
    return clip


def clip_path_for(model_path: str, index: int) -> str:
    """
    Example:
        >>> clip_path_for("Assets/World/waterfall.obj", 2)
        'Assets/World/waterfall[2].anim'
    """
    path = Path(model_path)
    return (path.parent / f"{path.stem}[{index}].anim").as_posix()


def derive_animation_clips(model_name: str, metadata: M2Metadata) -> List[Tuple[int, AnimationClip]]:
    """
    One clip per texture transform whose translation has keyframes.

    Clips keep the position of their transform as index. A transform that
    fails to convert is logged and skipped; the others are still returned.
    """
    clips = []
    for i, transform in enumerate(metadata.texture_transforms):
        if not transform.translation.has_keyframes():
            logger.debug(f"Texture transform {i} of {model_name} has no translation keys")
            continue

        logger.info(
            f"Creating animation clip {i} for {model_name} "
            f"({len(transform.translation.timestamps)} timestamp groups, "
            f"{len(transform.translation.values)} value groups)"
        )
        try:
            clips.append((i, create_animation_clip(transform, name=f"{model_name}[{i}]")))
        except AnimationBuildError as e:
            logger.error(f"Failed to create animation clip {i} for {model_name}: {e}")
    return clips
