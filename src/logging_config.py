"""
Logging estruturado (JSON) no stdout.

O Streamlit reexecuta os scripts a cada interação, então o handler só é
instalado uma vez por processo.
"""

import logging
import os
import sys

from pythonjsonlogger import jsonlogger

_HANDLER_NAME = "ilpi-json"


def setup_logging(level: str | None = None) -> logging.Logger:
    root = logging.getLogger()

    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        ))
        root.addHandler(handler)

    root.setLevel(level or os.getenv("LOG_LEVEL", "INFO"))

    # bibliotecas de rede são muito verbosas em INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return root
