"""
Configuration constants for the county claims ranking pipeline.
"""

from typing import Dict, Tuple

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
CLAIMS_SOURCE: str = "data/weekly_claims_by_county.csv"
LABORFORCE_SOURCE: str = "data/laborforce_by_county.csv"
COUNTY_SHAPEFILE: str = "data/cb_2022_us_county_500k.zip"

DEFAULT_SEP: str = ","

# Raw column name -> canonical column name
CLAIMS_COLUMNS: Dict[str, str] = {
    "County": "unit_key",
    "Week Ending": "period",
    "Claims": "value",
}

LABORFORCE_COLUMNS: Dict[str, str] = {
    "County": "unit_key",
    "State FIPS": "state_code",
    "County FIPS": "county_code",
    "Period": "period",
    "Labor Force": "labor_force",
}

# ======================================================
#  KEYS
# ======================================================
STATE_NAME: str = "Nebraska"
STATE_FIPS: str = "31"
CLAIMS_KEY_SUFFIX: str = " County, NE"

# (state code width, county code width); concatenated without a separator
COMPOSITE_ID_WIDTHS: Tuple[int, int] = (2, 3)

# ======================================================
#  RANKING
# ======================================================
PERCENT_DECIMALS: int = 1
MAX_ORDINAL_RANK: int = 99

# ======================================================
#  REPORTS
# ======================================================
REPORT_HEADLINE: str = (
    "{unit_key} County saw {total:,} unemployment claims {period_label}."
)
REPORT_SHARE: str = (
    "That equals {percent:.1f}% of the county's labor force of {labor_force:,}."
)
REPORT_RANK: str = (
    "That share ranks {ordinal_label} among the {total_units} "
    "{state_name} counties with data."
)

# ======================================================
#  CHARTS / MAP
# ======================================================
LINE_COLOR: str = "#1f77b4"
MAP_COLOR_SCALE: str = "Reds"
GEOID_PROPERTY: str = "GEOID"
