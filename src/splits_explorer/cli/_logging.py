import logging
import sys

_THIRD_PARTY_LOGGERS = ("httpx", "httpcore")
_FORMAT = "%(asctime)s %(levelname)-8s %(name)s — %(message)s"


def _root_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Send log records to stderr so stdout stays clean for tables and CSV.

    ``verbose`` wins over ``quiet``. HTTP client chatter is held at WARNING
    unless verbose.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(_root_level(verbose, quiet))

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)

    for name in _THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if verbose else logging.WARNING)
