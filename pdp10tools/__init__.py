"""Read and write PDP-10 core images, tape images and related file formats."""

__version__ = "0.1.0"

__all__ = [
    "memory",
    "symbols",
    "svg",
    "words",
    "odt",
    "simh",
    "palx_format",
    "sblk",
    "plt",
    "rim10",
    "pdump",
    "mdl",
    "palxconv",
    "oldcpio",
]