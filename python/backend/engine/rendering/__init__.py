from backend.engine.rendering.regions import Region, TileDraw, image_fits, tile_draws, tile_size

__all__ = ["Region", "TileDraw", "image_fits", "tile_draws", "tile_size"]
