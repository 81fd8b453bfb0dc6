"""Domain layer — cells, addresses, clones, and expressions.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
