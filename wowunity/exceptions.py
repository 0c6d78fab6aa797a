"""Custom exceptions for metadata and asset post-processing"""


class WowUnityError(Exception):
    """Base exception for post-processing errors"""
    pass


class MetadataParseError(WowUnityError):
    """Sidecar description present but malformed (bad JSON or schema violation)"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse metadata {path}: {reason}")


class AnimationBuildError(WowUnityError):
    """Keyframe track could not be turned into an animation clip"""
    pass
