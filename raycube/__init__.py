"""Grid-based raycasting first-person engine for .cub map files."""

__version__ = "0.1.0"

__all__ = ["__version__"]