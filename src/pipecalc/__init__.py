"""pipecalc — evaluate pipe-delimited grids of cells, clones, and formulas."""

__version__ = "0.1.0"
