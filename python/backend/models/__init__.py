from backend.models.board import Board
from backend.models.edges import EdgeShape, EdgeTable, PieceEdges, Side
from backend.models.piece import Piece, PieceSnapshot, Point

__all__ = [
    "Board",
    "EdgeShape",
    "EdgeTable",
    "Piece",
    "PieceEdges",
    "PieceSnapshot",
    "Point",
    "Side",
]
