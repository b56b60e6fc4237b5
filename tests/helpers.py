# tests/helpers.py

import numpy as np

from geocolumns.vector import FeatureCollection

def assert_collection_invariants(collection: FeatureCollection):
    """Check that every column is aligned to the offset table."""
    offsets = collection.offsets
    count = collection.feature_count()

    assert len(offsets) == count + 1, \
        f"Offset table length {len(offsets)} != feature count {count} + 1"
    assert offsets[0] == 0, "Offset table must start at 0"
    assert np.all(np.diff(offsets.astype(np.int64)) >= 0), "Offset table is not non-decreasing"
    assert int(offsets[-1]) == len(collection.points), \
        f"Final offset {offsets[-1]} != point count {len(collection.points)}"

    assert len(collection._time) in (0, count), \
        f"Time column length {len(collection._time)} is neither 0 nor feature count {count}"
    for key in collection.text_keys():
        if count:
            assert collection.text_at(count - 1, key) is not None, f"Text column '{key}' is short"
        assert collection.text_at(count, key) is None, f"Text column '{key}' is long"
    for key in collection.numeric_keys():
        if count:
            assert collection.numeric_at(count - 1, key) is not None, f"Numeric column '{key}' is short"
        assert collection.numeric_at(count, key) is None, f"Numeric column '{key}' is long"

def coords_of(geometries):
    """Flatten shapely points into (x, y) tuples."""
    return [(geometry.x, geometry.y) for geometry in geometries]
