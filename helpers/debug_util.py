"""Debug utilities for controlling debug output across the app.

Provides a centralized way to handle debug messages, supporting both quiet mode
(logging only) and loud mode (print to stdout).
"""

import logging
import os

DEBUG_MODE_ENV = "TYPETEST_DEBUG_MODE"
VALID_MODES = ("quiet", "loud")


class DebugUtil:
    """Manage debug output based on debug mode setting.

    Supports two modes:
    - "quiet": Debug messages are logged only
    - "loud": Debug messages are printed to stdout
    """

    def __init__(self, mode: str | None = None) -> None:
        """Initialize the debug mode.

        Args:
            mode: Explicit mode. When omitted, the TYPETEST_DEBUG_MODE environment
                variable is read. Invalid values fall back to "quiet".
        """
        raw_mode = mode if mode is not None else os.environ.get(DEBUG_MODE_ENV, "quiet")
        self._mode = raw_mode.lower() if raw_mode.lower() in VALID_MODES else "quiet"

        self._logger = logging.getLogger("typetest.debug")
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)
            self._logger.setLevel(logging.DEBUG)

    def debugMessage(self, *args: object) -> None:
        """Output a debug message based on the current debug mode.

        In "quiet" mode messages go to the logger; in "loud" mode they are printed.
        """
        message = " ".join(str(arg) for arg in args)
        if not message:
            return
        if self._mode == "loud":
            print("[DEBUG]", message)
        else:
            self._logger.debug(message)
