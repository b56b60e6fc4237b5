# src/geocolumns/vector/__init__.py
#
# Copyright (c) The geocolumns project contributors
# This software is distributed under the Apache-2.0 license.
# See the NOTICE file for more information

"""
The vector subpackage provides the columnar feature collection for point and
multi-point data, its time and attribute columns, geometry iteration and the
adapters that exchange collections with GeoPandas.
"""

# Data structure
from .layer import (
    FeatureCollection
)

from .time import (
    TimeInterval
)

# Geometry iteration
from .geom import (
    GeometryKind,
    GeometryIterator,
    build_geometry
)

from .iterators import (
    RangeIterator
)

# Errors
from .errors import (
    GeoColumnsError,
    CollectionValidationError,
    MaskLengthError
)

# I/O
from .io import (
    ReaderConfig,
    load_collection,
    from_geodataframe,
    to_geodataframe
)

__all__ = [
    # Data structure
    "FeatureCollection",
    "TimeInterval",

    # Geometry iteration
    "GeometryKind",
    "GeometryIterator",
    "build_geometry",
    "RangeIterator",

    # Errors
    "GeoColumnsError",
    "CollectionValidationError",
    "MaskLengthError",

    # I/O
    "ReaderConfig",
    "load_collection",
    "from_geodataframe",
    "to_geodataframe"
]
