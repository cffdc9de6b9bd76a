"""src package initializer.

This package contains the county claims ranking pipeline used by the
command-line driver and the Shiny dashboard.  Modules include loading,
aggregation, key normalization, ranking, report text and plotting
helpers.  See individual module docstrings for details.
"""
