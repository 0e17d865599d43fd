import logging
import sys


logger = logging.getLogger("semver_release")

_HANDLER_NAME = "semver_release.cli"


def configure_logging(debug: bool):
    """
    Route package log records to stderr.

    stdout is reserved for the version bundle so that json/yaml output can be
    piped. Plain messages by default; in debug mode the level drops to DEBUG
    and every line is prefixed with the level and the emitting module.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(log_level)

    handler = next(
        (h for h in logger.handlers if h.get_name() == _HANDLER_NAME), None
    )
    if handler is None:
        if logger.hasHandlers():
            # Records already propagate to a configured handler
            return
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        logger.addHandler(handler)

    fmt = "%(levelname)s %(name)s: %(message)s" if debug else "%(message)s"
    handler.setFormatter(logging.Formatter(fmt))
