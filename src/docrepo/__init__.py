"""
docrepo - Generic async repository over MongoDB document collections

This package contains:
- storage: Document contract, pagination, Mongo adapter and repositories
- platform: Cross-cutting concerns (configuration, logging)
"""

__version__ = "0.1.0"
