"""Entry point for the segmerge HTTP service."""

import uvicorn

from segmerge.api import create_app
from segmerge.config import load_config


def main() -> None:
    """Load configuration and serve the API with uvicorn."""
    config = load_config()
    app = create_app(config)

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
