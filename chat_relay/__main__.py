"""Run the chat relay with uvicorn: `python -m chat_relay`."""

from __future__ import annotations

import uvicorn

from chat_relay.config.server import SERVER_HOST, SERVER_PORT
from chat_relay.config.logging import LOG_LEVEL


def main() -> None:
    uvicorn.run("chat_relay.server:app", host=SERVER_HOST, port=SERVER_PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
