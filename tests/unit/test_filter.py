# tests/unit/test_filter.py

import numpy as np
import pandas as pd
import pytest

from geocolumns.vector import FeatureCollection, GeometryKind, MaskLengthError, CollectionValidationError
from helpers import assert_collection_invariants, coords_of

# --- In-place Filter Tests ---

def test_scenario_drop_middle_point(point_collection):
    point_collection.filter_inplace([True, False, True])

    assert point_collection.feature_count() == 2
    assert coords_of(point_collection.geometry_iter()) == [(0.0, 0.0), (2.0, 2.0)]
    assert point_collection.offsets.tolist() == [0, 1, 2]
    assert_collection_invariants(point_collection)

def test_all_true_is_noop(rich_collection):
    """An all-True mask leaves every column untouched."""
    points = rich_collection.points.copy()
    offsets = rich_collection.offsets.copy()
    before = [rich_collection.time_at(i) for i in range(3)]

    rich_collection.filter_inplace([True, True, True])

    assert np.array_equal(rich_collection.points, points)
    assert rich_collection.points.tobytes() == points.tobytes()
    assert rich_collection.offsets.tobytes() == offsets.tobytes()
    assert [rich_collection.time_at(i) for i in range(3)] == before
    assert rich_collection.text_at(2, "species") == "Betula"

def test_noop_keeps_iterators_valid(point_collection):
    geometries = point_collection.geometry_iter()
    point_collection.filter_inplace([True, True, True])
    assert len(list(geometries)) == 3

def test_mask_length_mismatch(point_collection):
    with pytest.raises(MaskLengthError):
        point_collection.filter_inplace([True, False])
    assert point_collection.feature_count() == 3

def test_mask_error_is_not_validation_error(point_collection):
    """Callers handling validation errors must not swallow contract violations."""
    with pytest.raises(MaskLengthError):
        try:
            point_collection.filter_inplace([True] * 4)
        except CollectionValidationError:
            pytest.fail("Mask length violation was reported as a validation error")

def test_alignment_after_filter(rich_collection, intervals):
    rich_collection.filter_inplace([False, True, True])

    assert rich_collection.feature_count() == 2
    assert rich_collection.text_at(0, "species") == "Picea"
    assert rich_collection.text_at(1, "species") == "Betula"
    assert rich_collection.numeric_at(0, "height") == 22.0
    assert rich_collection.numeric_at(1, "height") == 9.25
    assert rich_collection.time_at(0) == intervals[1]
    assert rich_collection.time_at(1) == intervals[2]
    assert rich_collection.has_time()
    assert rich_collection.global_text("source") == "survey-2021"
    assert_collection_invariants(rich_collection)

def test_filter_everything(rich_collection):
    rich_collection.filter_inplace([False, False, False])

    assert rich_collection.feature_count() == 0
    assert rich_collection.points.shape == (0, 2)
    assert rich_collection.offsets.tolist() == [0]
    assert list(rich_collection.geometry_iter()) == []
    assert_collection_invariants(rich_collection)

def test_multipoint_filter_rebuilds_offsets(multipoint_collection):
    """Offsets count points, not features, after compaction."""
    multipoint_collection.filter_inplace([False, True, True])

    assert multipoint_collection.feature_count() == 2
    assert multipoint_collection.offsets.tolist() == [0, 0, 3]
    assert multipoint_collection.geometry_at(0).is_empty
    assert [(p.x, p.y) for p in multipoint_collection.geometry_at(1).geoms] == [(5.0, 5.0), (6.0, 5.0), (7.0, 5.0)]
    assert_collection_invariants(multipoint_collection)

def test_multipoint_filter_keeps_order():
    points = [(0, 0), (1, 1), (2, 2), (3, 3), (4, 4), (5, 5)]
    collection = FeatureCollection.from_offsets(points, [0, 1, 3, 4, 6], GeometryKind.MULTI_POINT)
    collection.set_numeric_column("rank", [10, 20, 30, 40])

    collection.filter_inplace(np.array([True, False, False, True]))

    assert collection.offsets.tolist() == [0, 1, 3]
    assert collection.points.tolist() == [[0.0, 0.0], [4.0, 4.0], [5.0, 5.0]]
    assert [collection.numeric_at(i, "rank") for i in range(2)] == [10.0, 40.0]

# --- Copying Filter Tests ---

def test_filter_returns_copy(rich_collection):
    filtered = rich_collection.filter([True, False, True])

    assert filtered is not rich_collection
    assert filtered.feature_count() == 2
    assert rich_collection.feature_count() == 3
    assert filtered.text_at(1, "species") == "Betula"

def test_filter_inplace_flag(rich_collection):
    result = rich_collection.filter([True, False, False], inplace=True)
    assert result is rich_collection
    assert rich_collection.feature_count() == 1

def test_filter_callable(rich_collection):
    """Keep trees taller than 10m using a callable mask."""
    def tall(collection):
        return [collection.numeric_at(i, "height") > 10 for i in range(len(collection))]

    filtered = rich_collection.filter(tall)

    assert filtered.feature_count() == 2
    assert [filtered.text_at(i, "species") for i in range(2)] == ["Abies", "Picea"]

def test_filter_series(rich_collection):
    mask = pd.Series([False, True, False])
    filtered = rich_collection.filter(mask)
    assert coords_of(filtered.geometry_iter()) == [(1.0, 1.0)]
