"""
Package logging.

All records go through the "optline" logger, which carries a NullHandler so
the library stays silent until the host configures logging. group() hands out
named children ("optline.options", "optline.parser", ...). install() is the
one-call setup for scripts: a Rich handler on the root logger.
"""
import logging

from rich.logging import RichHandler

logger = logging.getLogger("optline")
logger.addHandler(logging.NullHandler())


def group(name, /):
    """
    return the child logger for one area of the package.
    """
    if not isinstance(name, str) or not name:
        raise TypeError("group() argument must be a non-empty string")
    return logger.getChild(name)


def install(level="INFO", /, **options):
    """
    route log records to a Rich console handler.

    extra keyword options are forwarded to RichHandler; rich_tracebacks is on
    by default.
    """
    handler = RichHandler(**{"rich_tracebacks": True} | options)
    logging.basicConfig(
        level=level,
        format="[%(name)s] %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    return handler


__all__ = (
    "logger",
    "group",
    "install",
)
