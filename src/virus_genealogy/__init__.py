"""In-memory virus genealogy: a rooted, exception-safe DAG container."""

__version__ = "0.1.0"
