"""Renderable export of scene trees."""

from .builder import build_scene, export_scene, make_primitive

__all__ = ["build_scene", "export_scene", "make_primitive"]
