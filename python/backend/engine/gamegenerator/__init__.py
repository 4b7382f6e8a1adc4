from backend.engine.gamegenerator.generator import PuzzleGenerator

__all__ = ["PuzzleGenerator"]
