"""fs-metadata-scanner package initialisation."""

__all__ = [
    "core",
    "metadata",
    "reporting",
    "shared",
]
