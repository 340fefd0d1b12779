"""Domain layer — field descriptors, catalogs, and value rules.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
