import logging

from src.logging_config import setup_logging


def test_setup_logging_instala_handler_uma_vez():
    root = setup_logging("DEBUG")
    setup_logging("WARNING")

    handlers = [h for h in root.handlers if h.get_name() == "ilpi-json"]
    assert len(handlers) == 1
    assert root.level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING
