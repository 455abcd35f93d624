"""CycleBloom — menstrual cycle projection service."""

__version__ = "0.1.0"
