"""Full-text search gateway for the questions corpus stored in Typesense."""

__version__ = "0.1.0"
