# src/geocolumns/__init__.py
#
# Copyright (c) The geocolumns project contributors
# This software is distributed under the Apache-2.0 license.
# See the NOTICE file for more information

"""
geocolumns: an in-memory columnar store for point and multi-point feature collections.
"""

from . import vector

from .vector import (
    FeatureCollection,
    TimeInterval,
    GeometryKind,
    CollectionValidationError,
    MaskLengthError,
    load_collection
)

__version__ = "0.1.0"

__all__ = [
    "vector",
    "FeatureCollection",
    "TimeInterval",
    "GeometryKind",
    "CollectionValidationError",
    "MaskLengthError",
    "load_collection"
]
