"""Run the relay with uvicorn: `python -m src`."""

from __future__ import annotations

import uvicorn

from src.runtime.settings import load_settings


def main() -> None:
    server = load_settings().server
    uvicorn.run("src.server:app", host=server.host, port=server.port)


if __name__ == "__main__":
    main()
