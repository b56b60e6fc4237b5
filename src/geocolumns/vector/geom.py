# src/geocolumns/vector/geom.py

"""
This module reconstructs per-feature geometries from a collection's shared point
buffer and offset table.

Each geometry kind has its own reconstruction function. `build_geometry` is the
single dispatch point used by both random access and iteration, so the two can
never disagree about what a feature looks like.
"""

import logging
from enum import Enum
from typing import Optional, Union, Iterator, TYPE_CHECKING

import numpy as np
from shapely.geometry import Point, MultiPoint

from .iterators import RangeIterator

if TYPE_CHECKING:
    from .layer import FeatureCollection

log = logging.getLogger(__name__)

__all__ = [
    "GeometryKind",
    "Geometry",
    "build_geometry",
    "GeometryIterator"
]

Geometry = Union[Point, MultiPoint]

class GeometryKind(Enum):
    """
    Shape a collection is specialized for. Fixed for the lifetime of the collection.

    Options:
        POINT: Exactly one point per feature, offsets are the identity mapping.
        MULTI_POINT: Zero or more points per feature, delimited by the offset table.
    """
    POINT = "point"
    MULTI_POINT = "multipoint"

def _point_from_range(points: np.ndarray, feature_range: range) -> Optional[Point]:
    if feature_range.start >= len(points):
        return None
    x, y = points[feature_range.start]
    return Point(float(x), float(y))

def _multipoint_from_range(points: np.ndarray, feature_range: range) -> MultiPoint:
    coords = points[feature_range.start:feature_range.stop].tolist()
    if len(coords) == 0:
        return MultiPoint()
    return MultiPoint(coords)

_BUILDERS = {
    GeometryKind.POINT: _point_from_range,
    GeometryKind.MULTI_POINT: _multipoint_from_range,
}

def _feature_range(
    kind: GeometryKind,
    points: np.ndarray,
    offsets: np.ndarray,
    index: int
    ) -> Optional[range]:
    """Helper that resolves a feature index to its point range, or None if out of bounds."""
    if index < 0:
        return None

    if kind is GeometryKind.POINT:
        if index >= len(points):
            return None
        return range(index, index + 1)

    if index + 1 >= len(offsets):
        return None
    return range(int(offsets[index]), int(offsets[index + 1]))

def build_geometry(
    kind: GeometryKind,
    points: np.ndarray,
    offsets: np.ndarray,
    index: int
    ) -> Optional[Geometry]:
    """
    Reconstructs the geometry of a single feature.

    Args:
        kind (GeometryKind): Geometry kind of the owning collection.
        points (np.ndarray): (N, 2) float64 point buffer.
        offsets (np.ndarray): Feature offset table of length feature_count + 1.
        index (int): Feature index.

    Returns:
        Optional[Geometry]: A new shapely geometry, or None if the index is out of range.
            An empty multi-point feature yields an empty MultiPoint, not None.
    """
    feature_range = _feature_range(kind, points, offsets, index)
    if feature_range is None:
        return None
    return _BUILDERS[kind](points, feature_range)

class GeometryIterator:
    """
    Cursor over the geometries of a collection, one per feature, in feature order.

    The cursor holds a reference to the collection and walks its offset table.
    Mutating the collection after the cursor is created invalidates it: the next
    step raises RuntimeError rather than reading replaced storage.

    Args:
        collection (FeatureCollection): The collection to walk.
    """
    def __init__(self, collection: 'FeatureCollection'):
        self._collection = collection
        self._version = collection._version
        self._build = _BUILDERS[collection.geometry_kind]
        self._ranges = RangeIterator(collection._offsets)

    def __iter__(self) -> Iterator[Geometry]:
        return self

    def __next__(self) -> Geometry:
        if self._collection._version != self._version:
            raise RuntimeError("FeatureCollection was modified during geometry iteration")

        feature_range = next(self._ranges)
        geometry = self._build(self._collection._points, feature_range)
        if geometry is None:
            # Offsets pointing past the point buffer break the collection invariants
            raise RuntimeError(f"Offset {feature_range.start} is outside the point buffer")
        return geometry
