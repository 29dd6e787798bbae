"""notemark - line-addressable markdown notes for agents."""

__version__ = "0.1.0"
