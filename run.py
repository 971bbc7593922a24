"""Maze mode launcher (web edition)

Runs the FastAPI service exposing maze mode over an in-memory host.
"""

import logging
import sys
from pathlib import Path

import uvicorn
import yaml
from dotenv import load_dotenv

from mazemode.core.state import Settings
from mazemode.server.api import create_app
from mazemode.server.controller import build_controller

# 预加载环境变量
load_dotenv()


def load_config() -> dict:
    """加载配置文件"""
    config_path = Path("config.yaml")
    if not config_path.exists():
        print("Warning: config.yaml not found, using default config")
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        print(f"Warning: Failed to load config ({exc}), using default config")
        return {}


def main():
    """脚本入口，启动 Web 服务"""
    print("=" * 60)
    print("Maze Mode - Web Edition")
    print("=" * 60)
    print()

    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")

    print("Loading configuration...")
    config = load_config()
    settings = Settings()
    if config:
        settings.load_from_dict(config)
    print("[OK] Configuration loaded")
    print()

    print(f"Loading start map {settings.start_map_id} from {settings.maps_dir}...")
    controller = build_controller(settings=settings)
    print(f"[OK] Player at ({settings.start_x}, {settings.start_y})")
    print()

    app = create_app(controller)

    url = f"http://{settings.server_host}:{settings.server_port}"
    print("=" * 60)
    print(f"Server running at: {url}")
    print(f"API docs: {url}/docs")
    print("=" * 60)
    print()

    config = uvicorn.Config(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level="info",
    )
    server = uvicorn.Server(config)
    try:
        server.run()
    except KeyboardInterrupt:
        print("\nServer interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
