"""Canton Party Intelligence: party lookup and network stats over the CantonNodes API."""

__version__ = "0.1.0"
