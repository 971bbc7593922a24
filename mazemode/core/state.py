"""Maze mode settings."""

from typing import Optional

from .rules import DOWN


class Settings:
    """Maze mode settings.

    ``gen_size`` doubles as the shared configuration slot through which the
    session controller hands the requested size to the map loader.
    """

    def __init__(self):
        # Generated maps
        self.gen_size = 10
        self.gen_floor = 2860
        self.gen_wall = 6335
        self.gen_tileset_id = 3
        self.maze_seed: Optional[int] = None

        # Persisted maps
        self.maps_dir = "./data"
        self.export_dir = "./export"

        # Player start
        self.start_map_id = 1
        self.start_x = 0
        self.start_y = 0
        self.start_direction = DOWN

        # Web server
        self.server_host = "127.0.0.1"
        self.server_port = 8000

    def load_from_dict(self, config: dict) -> None:
        if "maze" in config:
            m = config["maze"]
            self.gen_size = m.get("size", self.gen_size)
            self.gen_floor = m.get("floor", self.gen_floor)
            self.gen_wall = m.get("wall", self.gen_wall)
            self.gen_tileset_id = m.get("tileset_id", self.gen_tileset_id)
            self.maze_seed = m.get("seed", self.maze_seed)

        if "maps" in config:
            mp = config["maps"]
            self.maps_dir = mp.get("dir", self.maps_dir)
            self.export_dir = mp.get("export_dir", self.export_dir)

        if "player" in config:
            p = config["player"]
            self.start_map_id = p.get("map_id", self.start_map_id)
            self.start_x = p.get("x", self.start_x)
            self.start_y = p.get("y", self.start_y)
            self.start_direction = p.get("direction", self.start_direction)

        if "server" in config:
            srv = config["server"]
            self.server_host = srv.get("host", self.server_host)
            self.server_port = srv.get("port", self.server_port)
