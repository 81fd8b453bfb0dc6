"""Output layer — grid rendering and ServiceResult formatting.

Output may import from domain and services (for types only).
Rendering never mutates a grid.
"""
