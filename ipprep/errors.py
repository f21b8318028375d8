"""
Exception and warning types for the IP-MS preparation pipeline.
"""


class ConfigurationError(ValueError):
    """Invalid options or a table layout the pipeline cannot work with.

    Raised as soon as the problem is detected; no partial result is returned.
    """


class DataQualityWarning(UserWarning):
    """A non-fatal condition that weakens the guarantees of the output."""
