"""compose-parse - resolve Compose files into a single JSON project model."""

__version__ = "0.1.0"
