from backend.engine.dragsession.session import DragSession, DragSessionError

__all__ = ["DragSession", "DragSessionError"]
