"""Infrastructure layer — build graph, workspace, action execution.

This layer depends on stdlib, third-party libs (NetworkX, pluggy) and the
domain models it stores and executes. It must never import from services,
commands, or output. The service layer bridges between rules and
infrastructure.
"""
