# src/geocolumns/vector/layer.py

"""
This module defines the columnar feature collection: a shared point buffer, a
per-feature offset table, an optional time column and named attribute columns.

All per-feature columns are aligned by feature index. Every mutation rebuilds the
affected columns from the same mask and swaps them in together, so the collection
is never observable with columns of different lengths.
"""

import copy
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .errors import CollectionValidationError, MaskLengthError
from .geom import Geometry, GeometryIterator, GeometryKind, build_geometry
from .iterators import RangeIterator
from .time import TimeInterval

log = logging.getLogger(__name__)

__all__ = [
    "FeatureCollection"
]

Mask = Union[Sequence[bool], np.ndarray, pd.Series]

OFFSET_DTYPE = np.uint64

def _as_point_buffer(points) -> np.ndarray:
    """Helper that copies raw coordinates into an owned (N, 2) float64 buffer."""
    try:
        buffer = np.array(points, dtype=np.float64, copy=True)
    except (TypeError, ValueError) as e:
        raise CollectionValidationError(f"Coordinates cannot form an (N, 2) float array: {e}") from e
    if buffer.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if buffer.ndim != 2 or buffer.shape[1] != 2:
        raise CollectionValidationError(
            f"Expected an (N, 2) array of coordinates, got shape {buffer.shape}"
        )
    return np.ascontiguousarray(buffer)

def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view

def _compress(values: list, mask: np.ndarray) -> list:
    return [value for value, keep in zip(values, mask) if keep]

class FeatureCollection:
    """
    In-memory columnar store of point or multi-point features.

    The constructor builds a POINT collection from raw coordinates. MULTI_POINT
    collections come from `from_offsets`, which accepts a prepared offset table.

    Args:
        points: Sequence of (x, y) pairs or an (N, 2) array.
        time (Optional[Sequence[Optional[TimeInterval]]]): One interval per point.

    Raises:
        CollectionValidationError: If the time column length differs from the point count.
    """
    def __init__(
        self,
        points,
        time: Optional[Sequence[Optional[TimeInterval]]] = None
    ):
        buffer = _as_point_buffer(points)
        time_column = self._validate_time(time, len(buffer))

        self._kind = GeometryKind.POINT
        self._points = buffer
        self._offsets = np.arange(len(buffer) + 1, dtype=OFFSET_DTYPE)
        self._time: List[Optional[TimeInterval]] = time_column

        self._global_text: Dict[str, str] = {}
        self._global_numeric: Dict[str, float] = {}
        self._text: Dict[str, List[str]] = {}
        self._numeric: Dict[str, np.ndarray] = {}

        self._version = 0

    # --- Construction ---

    @classmethod
    def from_points(
        cls,
        points,
        time: Optional[Sequence[Optional[TimeInterval]]] = None
        ) -> 'FeatureCollection':
        """Builds a POINT collection with one feature per coordinate pair."""
        return cls(points, time)

    @classmethod
    def from_offsets(
        cls,
        points,
        offsets: Iterable[int],
        kind: GeometryKind = GeometryKind.MULTI_POINT,
        time: Optional[Sequence[Optional[TimeInterval]]] = None
        ) -> 'FeatureCollection':
        """
        Builds a collection from a point buffer and a prepared offset table.

        Feature i owns points[offsets[i]:offsets[i + 1]]. This is the entry point
        for readers producing multi-point data.

        Args:
            points: Sequence of (x, y) pairs or an (N, 2) array.
            offsets (Iterable[int]): Non-decreasing table starting at 0 and ending at N.
            kind (GeometryKind): Geometry kind of the new collection.
            time (Optional[Sequence[Optional[TimeInterval]]]): One interval per feature.

        Returns:
            FeatureCollection: A new collection owning copies of the inputs.

        Raises:
            CollectionValidationError: If the offsets or the time column are inconsistent.
        """
        buffer = _as_point_buffer(points)
        table = np.array(list(offsets), dtype=np.int64)

        if table.ndim != 1 or len(table) == 0:
            raise CollectionValidationError("Offset table must contain at least one entry")
        if table[0] != 0:
            raise CollectionValidationError(f"Offset table must start at 0, got {table[0]}")
        if np.any(np.diff(table) < 0):
            raise CollectionValidationError("Offset table must be non-decreasing")
        if table[-1] != len(buffer):
            raise CollectionValidationError(
                f"Last offset ({table[-1]}) must equal the point count ({len(buffer)})"
            )
        if kind is GeometryKind.POINT and not np.array_equal(table, np.arange(len(buffer) + 1)):
            raise CollectionValidationError("POINT collections require one point per feature")

        feature_count = len(table) - 1
        time_column = cls._validate_time(time, feature_count)

        collection = cls(np.empty((0, 2)))
        collection._kind = kind
        collection._points = buffer
        collection._offsets = table.astype(OFFSET_DTYPE)
        collection._time = time_column

        log.debug(f"Built {kind.value} collection with {feature_count} features and {len(buffer)} points")
        return collection

    @staticmethod
    def _validate_time(
        time: Optional[Sequence[Optional[TimeInterval]]],
        expected: int
        ) -> List[Optional[TimeInterval]]:
        if time is None:
            return []
        time_column = list(time)
        if len(time_column) != expected:
            raise CollectionValidationError(
                f"Time interval count ({len(time_column)}) does not match feature count ({expected})"
            )
        return time_column

    def copy(self) -> 'FeatureCollection':
        """Returns an independent deep copy of every column."""
        duplicate = copy.copy(self)
        duplicate._points = self._points.copy()
        duplicate._offsets = self._offsets.copy()
        duplicate._time = list(self._time)
        duplicate._global_text = dict(self._global_text)
        duplicate._global_numeric = dict(self._global_numeric)
        duplicate._text = {key: list(values) for key, values in self._text.items()}
        duplicate._numeric = {key: values.copy() for key, values in self._numeric.items()}
        duplicate._version = 0
        return duplicate

    # --- Structure ---

    @property
    def geometry_kind(self) -> GeometryKind:
        return self._kind

    @property
    def points(self) -> np.ndarray:
        """Read-only view of the shared (N, 2) point buffer."""
        return _read_only(self._points)

    @property
    def offsets(self) -> np.ndarray:
        """Read-only view of the offset table (feature_count + 1 entries)."""
        return _read_only(self._offsets)

    def feature_count(self) -> int:
        return len(self._offsets) - 1

    def __len__(self) -> int:
        return self.feature_count()

    def __repr__(self):
        return (
            f"<FeatureCollection kind={self._kind.value} features={self.feature_count()} "
            f"points={len(self._points)} time={self.has_time()}>"
        )

    def feature_index_ranges(self) -> RangeIterator:
        """Lazily yields the half-open point range of every feature, in order."""
        return RangeIterator(self._offsets)

    # --- Geometry ---

    def geometry_at(self, index: int) -> Optional[Geometry]:
        """
        Returns a copy of one feature's geometry.

        Args:
            index (int): Feature index. Negative indices count as out of range.

        Returns:
            Optional[Geometry]: Point or MultiPoint depending on the collection kind,
                or None if the index is out of range.
        """
        return build_geometry(self._kind, self._points, self._offsets, index)

    def geometry_iter(self) -> GeometryIterator:
        """
        Returns a fresh iterator over every feature's geometry.

        Do not advance the iterator after mutating the collection; it will raise.
        """
        return GeometryIterator(self)

    # --- Time ---

    def has_time(self) -> bool:
        return len(self._time) == self.feature_count()

    def time_at(self, index: int) -> Optional[TimeInterval]:
        if index < 0 or index >= len(self._time):
            return None
        return self._time[index]

    def set_time(self, index: int, interval: Optional[TimeInterval]) -> None:
        """
        Replaces the interval of one feature.

        Raises:
            IndexError: If the collection has no time column or the index is out of range.
        """
        if index < 0 or index >= len(self._time):
            raise IndexError(f"No time interval at index {index}")
        self._time[index] = interval
        self._version += 1

    # --- Attributes ---

    def global_text(self, key: str) -> Optional[str]:
        return self._global_text.get(key)

    def global_numeric(self, key: str) -> Optional[float]:
        return self._global_numeric.get(key)

    def set_global_text(self, key: str, value: str) -> None:
        self._global_text[key] = str(value)

    def set_global_numeric(self, key: str, value: float) -> None:
        self._global_numeric[key] = float(value)

    def text_at(self, index: int, key: str) -> Optional[str]:
        column = self._text.get(key)
        if column is None or index < 0 or index >= len(column):
            return None
        return column[index]

    def numeric_at(self, index: int, key: str) -> Optional[float]:
        column = self._numeric.get(key)
        if column is None or index < 0 or index >= len(column):
            return None
        return float(column[index])

    def text_keys(self) -> List[str]:
        return list(self._text)

    def numeric_keys(self) -> List[str]:
        return list(self._numeric)

    def set_text_column(self, key: str, values: Sequence[str]) -> None:
        column = [str(value) for value in values]
        self._check_column_length(key, len(column))
        self._text[key] = column
        self._version += 1

    def set_numeric_column(self, key: str, values: Sequence[float]) -> None:
        column = np.array(values, dtype=np.float64, copy=True)
        if column.ndim != 1:
            raise CollectionValidationError(f"Numeric column '{key}' must be one-dimensional")
        self._check_column_length(key, len(column))
        self._numeric[key] = column
        self._version += 1

    def _check_column_length(self, key: str, length: int) -> None:
        if length != self.feature_count():
            raise CollectionValidationError(
                f"Column '{key}' has {length} values but the collection has {self.feature_count()} features"
            )

    # --- Filtering ---

    def filter_inplace(self, keep: Mask) -> None:
        """
        Retains only the features whose flag is True, compacting every column.

        Relative feature order is preserved. Columns are rebuilt from the same mask
        and assigned together once all of them are ready.

        Args:
            keep (Mask): One boolean per feature.

        Raises:
            MaskLengthError: If the mask length differs from the feature count.
        """
        mask = np.asarray(keep, dtype=bool)
        feature_count = self.feature_count()

        if mask.ndim != 1 or len(mask) != feature_count:
            raise MaskLengthError(
                f"Mask has {mask.size} flags but the collection has {feature_count} features"
            )

        keep_count = int(np.count_nonzero(mask))
        if keep_count == feature_count:
            log.debug("All features retained, filter is a no-op")
            return

        time = _compress(self._time, mask)
        text = {key: _compress(values, mask) for key, values in self._text.items()}
        numeric = {key: values[mask] for key, values in self._numeric.items()}

        offsets = [0]
        chunks = []
        point_count = 0
        for feature_range, retained in zip(self.feature_index_ranges(), mask):
            if not retained:
                continue
            chunks.append(self._points[feature_range.start:feature_range.stop])
            point_count += len(feature_range)
            offsets.append(point_count)

        points = np.concatenate(chunks) if chunks else np.empty((0, 2), dtype=np.float64)

        self._time = time
        self._text = text
        self._numeric = numeric
        self._points = np.ascontiguousarray(points)
        self._offsets = np.array(offsets, dtype=OFFSET_DTYPE)
        self._version += 1

        log.debug(f"Filtered collection from {feature_count} to {keep_count} features ({point_count} points)")

    def filter(
        self,
        keep: Union[Mask, Callable[['FeatureCollection'], Mask]],
        inplace: bool = False
        ) -> 'FeatureCollection':
        """
        Filters features by a boolean mask or by a callable producing one.

        Args:
            keep: Mask with one flag per feature, or a callable taking this collection.
            inplace (bool): Modify this collection instead of returning a filtered copy.

        Returns:
            FeatureCollection: The filtered collection (self when inplace=True).
        """
        mask = keep(self) if callable(keep) else keep

        if inplace:
            self.filter_inplace(mask)
            return self

        filtered = self.copy()
        filtered.filter_inplace(mask)
        return filtered
