"""Shared testing fixtures for the md2html test suite."""

from .units import bullet, heading, image, line  # noqa: F401
from .workspace import WorkspaceBuilder, build_tree  # noqa: F401

__all__ = [
    "WorkspaceBuilder",
    "build_tree",
    "bullet",
    "heading",
    "image",
    "line",
]
