"""
Exception hierarchy for Vital Canvas.

Only the boundary adapters (LLM client, data store) raise these. Services
catch them at their call site and turn them into result objects.
"""


class VitalCanvasError(Exception):
    """Base class for all Vital Canvas errors."""


class ConfigurationError(VitalCanvasError, ValueError):
    """Required configuration (API key, store URL) is missing."""


class LLMProviderError(VitalCanvasError):
    """The LLM provider call failed, timed out, or returned nothing."""


class LLMResponseParseError(VitalCanvasError):
    """The LLM output did not match the expected response contract."""


class DataStoreError(VitalCanvasError):
    """Reading from the hosted data store failed."""
