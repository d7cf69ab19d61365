"""Hot deal crawler and ingestion pipeline."""

__version__ = "0.1.0"
