"""Application entry point for the document structuring API server."""

import uvicorn

from doc_structurer.api.app import app
from doc_structurer.utils.config import load_config
from doc_structurer.utils.logger import setup_logging


def main() -> None:
    """Check configuration, then start the FastAPI application server.

    Raises:
        ConfigurationError: If no completion API key is configured.
    """
    config = load_config()
    setup_logging(config.log_level)
    config.llm.require_api_key()
    uvicorn.run(app, host="0.0.0.0", port=8080)


if __name__ == "__main__":
    main()
