from backend.engine.gamesolver.solver import DragMove, Solver

__all__ = ["DragMove", "Solver"]
