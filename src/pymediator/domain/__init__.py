"""Domain layer — message base types and classification enums.

This layer depends only on stdlib and pydantic.
It must never import from dispatch, plugins, commands, or config.
"""
