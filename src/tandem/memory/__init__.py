"""Persistent records kept outside the documents."""

from tandem.memory.registry import ProjectRecord, ProjectRegistry

__all__ = ["ProjectRecord", "ProjectRegistry"]
