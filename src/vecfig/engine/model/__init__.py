"""
どこで: `vecfig.engine.model`。
何を: 図 `Figure` と図オブジェクト `FigureObject`（構築 API とスナップショット）。
"""

from .figure import Figure, FigureObject, FigureSnapshot, ObjectsView

__all__ = ["Figure", "FigureObject", "FigureSnapshot", "ObjectsView"]
