from backend.engine.outline.builder import CubicTo, LineTo, Outline, OutlineBuilder

__all__ = ["CubicTo", "LineTo", "Outline", "OutlineBuilder"]
