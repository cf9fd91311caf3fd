# modproxy/server.py
from __future__ import annotations

import logging

import uvicorn

from modproxy.app.factory import createApp
from modproxy.app.globals import config

# Basic logging setup, before config is read
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


app = createApp()



def main() -> None:
    host = str(config("server.host", "127.0.0.1"))
    port = int(config("server.port", 8100))
    logger.info("Serving on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
