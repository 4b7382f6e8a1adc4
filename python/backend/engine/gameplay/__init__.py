from backend.engine.gameplay.engine import BoardEngine, Phase

__all__ = ["BoardEngine", "Phase"]
