# src/lambdalog/util/log.py: Diagnostics logger for the library itself.
# The library's own messages (cache misses, provider swaps, sink failures) are
# written as plain text to stderr under the 'lambdalog' logger. That logger does
# not propagate, so diagnostics never re-enter a JSON pipeline that routes the
# root logger through this library.

import logging
import sys

PACKAGE_LOGGER = "lambdalog"
DIAGNOSTIC_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

def get_logger(name):
    logger = logging.getLogger(name)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(DIAGNOSTIC_FORMAT))
        package_logger.addHandler(handler)
        package_logger.setLevel(logging.WARNING)
        package_logger.propagate = False
    return logger
