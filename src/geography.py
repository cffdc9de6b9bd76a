"""County polygons for the state map."""

from __future__ import annotations

import logging
from pathlib import Path

import geopandas as gpd

from .config import COUNTY_SHAPEFILE, GEOID_PROPERTY, STATE_FIPS
from .keys import build_composite_id

logger = logging.getLogger(__name__)


def load_county_geojson(
    path: str | Path = COUNTY_SHAPEFILE, state_code: str = STATE_FIPS
) -> dict:
    """Read county boundaries and return them as a GeoJSON mapping.

    The file may be a shapefile (zipped or not) or GeoJSON with Census
    ``STATEFP``/``COUNTYFP`` attributes.  Only counties of ``state_code``
    are kept and a ``GEOID`` property is derived when the file lacks one.
    Geometries are reprojected to WGS84 for plotting.
    """
    gdf = gpd.read_file(path)
    missing = [col for col in ("STATEFP", "COUNTYFP") if col not in gdf.columns]
    if missing:
        raise KeyError(f"Missing expected columns: {missing}")

    gdf = gdf[gdf["STATEFP"].astype(str) == state_code].copy()
    if GEOID_PROPERTY not in gdf.columns:
        gdf[GEOID_PROPERTY] = [
            build_composite_id(state, county)
            for state, county in zip(gdf["STATEFP"], gdf["COUNTYFP"])
        ]
    if gdf.crs is not None and gdf.crs.to_epsg() != 4326:
        gdf = gdf.to_crs(epsg=4326)

    logger.info("Loaded %d county polygons for state %s from %s", len(gdf), state_code, path)
    return gdf.__geo_interface__
