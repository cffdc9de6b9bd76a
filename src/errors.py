"""Exceptions raised by the ranking pipeline.

Rows dropped for data-quality reasons are never raised; they are logged by
the module that drops them.  The errors below abort a whole pipeline run.
"""


class PipelineError(Exception):
    """Base class for errors that abort a pipeline run."""


class UnsupportedRangeError(PipelineError, ValueError):
    """A rank falls outside the range the ordinal tables cover."""


class ConfigurationError(PipelineError, ValueError):
    """Malformed identifiers or inputs detected before the join."""
