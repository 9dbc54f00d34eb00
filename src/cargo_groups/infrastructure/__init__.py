"""Infrastructure layer — cargo subprocesses and metadata parsing.

This layer depends on stdlib and pydantic.
It must never import from domain, services, commands, or output.
The service layer bridges between domain models and infrastructure.
"""
