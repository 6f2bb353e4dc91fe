"""Domain layer — source classification, units, closures, and build actions.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
