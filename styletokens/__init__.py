"""Design token resolution: token dictionaries and CSS custom properties."""

__version__ = "0.1.0"
