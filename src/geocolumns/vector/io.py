# src/geocolumns/vector/io.py

"""
This module connects feature collections to vector files and GeoDataFrames using GeoPandas.
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Optional, Union, List
import logging

import numpy as np
import pandas as pd
import geopandas as gpd
import pyogrio
from shapely.geometry import MultiPoint

from .errors import CollectionValidationError
from .geom import GeometryKind
from .layer import FeatureCollection
from .time import TimeInterval

log = logging.getLogger(__name__)

__all__ = [
    "ReaderConfig",
    "load_collection",
    "from_geodataframe",
    "to_geodataframe"
]

TIME_START_COLUMN = "time_start"
TIME_END_COLUMN = "time_end"

@dataclass
class ReaderConfig:
    """
    Options controlling how a vector source becomes a feature collection.

    Args:
        engine (str): GeoPandas I/O engine. Default="pyogrio".
        layer (Optional[str]): Layer to read from multi-layer sources.
        time_start_column (Optional[str]): Column holding interval start instants.
        time_end_column (Optional[str]): Column holding interval end instants.
        text_columns (Optional[List[str]]): Columns to attach as text. None classifies by dtype.
        numeric_columns (Optional[List[str]]): Columns to attach as numeric. None classifies by dtype.
        drop_null_geometries (bool): Skip rows without geometry instead of failing. Default=True.
    """
    engine: str = "pyogrio"
    layer: Optional[str] = None
    time_start_column: Optional[str] = None
    time_end_column: Optional[str] = None
    text_columns: Optional[List[str]] = None
    numeric_columns: Optional[List[str]] = None
    drop_null_geometries: bool = True

def load_collection(path: Union[str, Path], config: Optional[ReaderConfig] = None) -> FeatureCollection:
    """
    Reads a point or multi-point vector file into a feature collection.

    Args:
        path (Union[str, Path]): Any file GeoPandas can read (GeoJSON, GeoPackage, Shapefile...).
        config (Optional[ReaderConfig]): Reader options.

    Returns:
        FeatureCollection: Collection holding every feature of the file.

    Raises:
        FileNotFoundError: If the path does not exist.
        CollectionValidationError: If the file holds unsupported or mixed geometry types.
            Also raised when no layer is configured and the source holds more than one layer.
    """
    config = config or ReaderConfig()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Vector file not found: {path}")

    kwargs = {}
    if config.layer is not None:
        kwargs["layer"] = config.layer
    else:
        layers = pyogrio.list_layers(path)
        if len(layers) != 1:
            names = [str(name) for name, _ in layers]
            raise CollectionValidationError(
                f"Expected a single layer in {path}, found {len(layers)}: {names}. Set ReaderConfig.layer to choose one"
            )

    gdf = gpd.read_file(path, engine=config.engine, **kwargs)
    log.info(f"Loaded {len(gdf)} features from {path}")
    return from_geodataframe(gdf, config)

def _collect_geometry(geometries: gpd.GeoSeries):
    """Helper that flattens geometries into a point buffer, an offset table and a kind."""
    geom_types = set(geometries.geom_type.unique())

    if not geom_types or geom_types == {"Point"}:
        points = [(geometry.x, geometry.y) for geometry in geometries]
        return points, None, GeometryKind.POINT

    if geom_types <= {"Point", "MultiPoint"}:
        points = []
        offsets = [0]
        for geometry in geometries:
            if geometry.geom_type == "Point":
                geometry = MultiPoint([geometry])
            points.extend((part.x, part.y) for part in geometry.geoms)
            offsets.append(len(points))
        return points, offsets, GeometryKind.MULTI_POINT

    raise CollectionValidationError(
        f"Only Point and MultiPoint geometries are supported, found {sorted(geom_types)}"
    )

def _collect_time(gdf: pd.DataFrame, config: ReaderConfig) -> Optional[List[TimeInterval]]:
    """Helper that builds the time column from the configured start/end columns."""
    if config.time_start_column is None and config.time_end_column is None:
        return None

    def _instants(column: Optional[str]) -> list:
        if column is None:
            return [None] * len(gdf)
        if column not in gdf.columns:
            raise CollectionValidationError(f"Time column '{column}' not found")
        values = pd.to_datetime(gdf[column], utc=True)
        return [None if pd.isna(value) else value.to_pydatetime() for value in values]

    starts = _instants(config.time_start_column)
    ends = _instants(config.time_end_column)
    return [TimeInterval(start, end) for start, end in zip(starts, ends)]

def _classify_columns(gdf: pd.DataFrame, config: ReaderConfig):
    """Helper that splits attribute columns into text and numeric names."""
    reserved = {gdf.geometry.name, config.time_start_column, config.time_end_column}
    candidates = [column for column in gdf.columns if column not in reserved]

    explicit = list(config.numeric_columns or []) + list(config.text_columns or [])
    missing = [column for column in explicit if column not in gdf.columns]
    if missing:
        raise CollectionValidationError(f"Attribute columns not found: {missing}")

    if config.numeric_columns is not None:
        numeric = list(config.numeric_columns)
    else:
        numeric = [
            column for column in candidates
            if pd.api.types.is_numeric_dtype(gdf[column]) and not pd.api.types.is_bool_dtype(gdf[column])
        ]

    if config.text_columns is not None:
        text = list(config.text_columns)
    else:
        text = [
            column for column in candidates
            if column not in numeric
            and (pd.api.types.is_object_dtype(gdf[column]) or pd.api.types.is_string_dtype(gdf[column]))
        ]

    skipped = [column for column in candidates if column not in numeric and column not in text]
    if skipped:
        log.warning(f"Skipping attribute columns with unsupported dtypes: {skipped}")

    return text, numeric

def from_geodataframe(gdf: gpd.GeoDataFrame, config: Optional[ReaderConfig] = None) -> FeatureCollection:
    """
    Converts a GeoDataFrame of points or multi-points into a feature collection.

    All-Point frames produce a POINT collection. Frames holding MultiPoint geometries
    (single points are promoted) produce a MULTI_POINT collection. Attribute columns
    are attached as text or numeric columns.

    Args:
        gdf (gpd.GeoDataFrame): Source features.
        config (Optional[ReaderConfig]): Reader options.

    Returns:
        FeatureCollection: The converted collection.
    """
    if not isinstance(gdf, gpd.GeoDataFrame):
        raise TypeError(f"Expected GeoDataFrame, got {type(gdf)}")
    config = config or ReaderConfig()

    null_mask = gdf.geometry.isna() | gdf.geometry.is_empty
    if null_mask.any():
        if not config.drop_null_geometries:
            raise CollectionValidationError(f"{int(null_mask.sum())} features have no geometry")
        log.warning(f"Dropping {int(null_mask.sum())} features without geometry")
        gdf = gdf[~null_mask]

    points, offsets, kind = _collect_geometry(gdf.geometry)
    time = _collect_time(gdf, config)

    if kind is GeometryKind.POINT:
        collection = FeatureCollection.from_points(points, time)
    else:
        collection = FeatureCollection.from_offsets(points, offsets, kind, time)

    text_columns, numeric_columns = _classify_columns(gdf, config)
    for column in numeric_columns:
        collection.set_numeric_column(column, pd.to_numeric(gdf[column], errors="coerce").to_numpy(dtype=np.float64))
    for column in text_columns:
        collection.set_text_column(column, gdf[column].fillna("").astype(str).tolist())

    log.debug(
        f"Converted {len(collection)} features ({kind.value}) with "
        f"{len(text_columns)} text and {len(numeric_columns)} numeric columns"
    )
    return collection

def to_geodataframe(collection: FeatureCollection, crs=None) -> gpd.GeoDataFrame:
    """
    Converts a feature collection back into a GeoDataFrame.

    Args:
        collection (FeatureCollection): Source collection.
        crs: Optional CRS assigned to the result.

    Returns:
        gpd.GeoDataFrame: One row per feature with geometry, attributes and time bounds.
    """
    data = {}
    for key in collection.text_keys():
        data[key] = [collection.text_at(index, key) for index in range(len(collection))]
    for key in collection.numeric_keys():
        data[key] = [collection.numeric_at(index, key) for index in range(len(collection))]

    if collection.has_time() and len(collection) > 0:
        intervals = [collection.time_at(index) for index in range(len(collection))]
        data[TIME_START_COLUMN] = [interval.start if interval else None for interval in intervals]
        data[TIME_END_COLUMN] = [interval.end if interval else None for interval in intervals]

    return gpd.GeoDataFrame(data, geometry=list(collection.geometry_iter()), crs=crs)
