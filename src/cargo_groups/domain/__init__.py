"""Domain layer — packages, group patterns, and resolution rules.

This layer depends only on stdlib, pydantic, and NetworkX.
It must never import from services, infrastructure, commands, or config.
"""
