import logging

from rich.console import Console
from rich.logging import RichHandler

from astgen.config import debug_enabled


def setup_logging(verbose: bool = False, debug: bool | None = None) -> logging.Logger:
    """Route ``astgen`` log records to stderr through rich.

    WARNING by default, INFO when ``verbose``, DEBUG when ``debug`` (which
    defaults to the ASTGEN_DEBUG environment variable).
    """
    if debug is None:
        debug = debug_enabled()

    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger("astgen")
    logger.setLevel(level)
    logger.handlers.clear()
    handler = RichHandler(console=Console(stderr=True), show_path=debug, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
