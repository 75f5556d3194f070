"""Opening hours, ordering availability and delivery fees for the ordering site."""

__version__ = "0.1.0"
