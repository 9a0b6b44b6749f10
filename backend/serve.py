"""Run the API with uvicorn.

Usage:
    python -m backend.serve
"""
import logging

import uvicorn

from backend.core import config


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    uvicorn.run("backend.main:app", host=config.API_HOST, port=config.API_PORT)


if __name__ == "__main__":
    main()
