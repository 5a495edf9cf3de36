from backend.engine.gamegenerator.generator import DEFAULT_SHUFFLE_MOVES, GameGenerator

__all__ = ["DEFAULT_SHUFFLE_MOVES", "GameGenerator"]
