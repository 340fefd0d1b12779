"""Service layer — prompting, finalization, and project generation.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
