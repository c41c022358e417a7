"""Entry point: serve the technotes API with uvicorn."""
import argparse

import uvicorn

from .config import load_config_from_env
from .main import create_app


def main() -> None:
    """Run the FastAPI application using Uvicorn."""
    parser = argparse.ArgumentParser(description="Run the technotes API.")
    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="Path to the environment configuration file.",
    )
    parser.add_argument("--host", type=str, default=None, help="Overrides HOST.")
    parser.add_argument("--port", type=int, default=None, help="Overrides PORT.")
    args = parser.parse_args()

    config = load_config_from_env(args.env_file)
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port

    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
