"""
Vector helpers for points on the globe.

Plain 3-vectors (numpy arrays) only. The local tangent frame of a node is
built from an explicit axis-angle rotation instead of scene transforms.
"""

from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation

# Global "forward" axis every node direction is rotated onto
FORWARD = np.array([0.0, 0.0, 1.0])

_EPSILON = 1e-12


def as_vector(point: Sequence[float]) -> np.ndarray:
    """Convert a 3-sequence to a float numpy vector."""
    vector = np.asarray(point, dtype=float)
    if vector.shape != (3,):
        raise ValueError(f"Expected a 3D point, got shape {vector.shape}")
    return vector


def normalize(vector: np.ndarray) -> np.ndarray:
    """Return the unit vector, or a zero vector when the input has no length."""
    length = np.linalg.norm(vector)
    if length < _EPSILON:
        return np.zeros(3)
    return vector / length


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Straight-line (Euclidean) distance between two points."""
    return float(np.linalg.norm(as_vector(a) - as_vector(b)))


def angle_between(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Angle in degrees between two vectors measured from the origin.

    For positions on a sphere this is the great-circle angle between them.
    Zero-length input yields 0.
    """
    va = as_vector(a)
    vb = as_vector(b)
    denominator = np.linalg.norm(va) * np.linalg.norm(vb)
    if denominator < _EPSILON:
        return 0.0
    cosine = np.clip(np.dot(va, vb) / denominator, -1.0, 1.0)
    return float(np.degrees(np.arccos(cosine)))


def angles_from(center: Sequence[float], points: np.ndarray) -> np.ndarray:
    """Angle in degrees between ``center`` and each row of ``points``.

    Vectorised form of angle_between; rows with no length give 0.
    """
    vc = as_vector(center)
    points = np.asarray(points, dtype=float).reshape(-1, 3)
    denominators = np.linalg.norm(points, axis=1) * np.linalg.norm(vc)
    safe = np.where(denominators < _EPSILON, 1.0, denominators)
    cosines = np.clip(points @ vc / safe, -1.0, 1.0)
    angles = np.degrees(np.arccos(cosines))
    return np.where(denominators < _EPSILON, 0.0, angles)


def from_to_rotation(source: Sequence[float], target: Sequence[float] = FORWARD) -> Rotation:
    """
    Build the shortest rotation taking direction ``source`` onto ``target``.

    Axis = source x target, angle = angle between them (Rodrigues form via a
    rotation vector). Parallel inputs give the identity; anti-parallel
    inputs rotate half a turn around any axis perpendicular to ``source``.
    """
    src = normalize(as_vector(source))
    dst = normalize(as_vector(target))

    if not src.any() or not dst.any():
        return Rotation.identity()

    axis = np.cross(src, dst)
    sin_angle = np.linalg.norm(axis)
    cos_angle = np.clip(np.dot(src, dst), -1.0, 1.0)

    if sin_angle < _EPSILON:
        if cos_angle > 0:
            return Rotation.identity()
        # Half turn: pick the world axis least aligned with src
        helper = np.eye(3)[int(np.argmin(np.abs(src)))]
        axis = normalize(np.cross(src, helper))
        return Rotation.from_rotvec(axis * np.pi)

    angle = np.arctan2(sin_angle, cos_angle)
    return Rotation.from_rotvec(axis / sin_angle * angle)

