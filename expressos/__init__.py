"""ExpressOS -- scaffold Express services with a clean-architecture layout."""

__version__ = "1.0.0"
