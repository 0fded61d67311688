"""
Custom logging configuration for Tycoon Engine.

Extends Python's standard logging with a custom DEEP_DEBUG level (5)
for very verbose debugging output. Provides TycoonLogger class with
per-system log level configuration support.

Log Levels
----------
- CRITICAL (50): Critical errors
- ERROR (40): Errors
- WARNING (30): Warnings (rejected intents, missed payments)
- INFO (20): Informational messages (default)
- DEBUG (10): Debug messages
- DEEP_DEBUG (5): Very verbose debug messages (per-tick timer accounting)

Examples
--------
Use logger in systems:

>>> from tycoon import logging
>>> logger = logging.getLogger("tycoon.systems.collect_scheduled_emi")
>>> logger.info("EMI collected")
>>> logger.deep("Timer at %.1f ms", 1234.0)

Configure per-system log levels:

>>> import tycoon as ty
>>> log_config = {
...     "default_level": "INFO",
...     "systems": {
...         "collect_scheduled_emi": "DEBUG",
...         "process_intents": "WARNING"
...     }
... }
>>> fin = ty.Finance.init(logging=log_config)

See Also
--------
System.get_logger : Get logger for specific system
tycoon.config.ConfigValidator : Validates the logging block
"""

import logging
from typing import Any

(CRITICAL, ERROR, WARNING, INFO, DEBUG) = (
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
)
DEEP_DEBUG = 5
logging.addLevelName(DEEP_DEBUG, "DEEP")


class TycoonLogger(logging.Logger):
    """
    Custom logger with DEEP_DEBUG level support.

    Extends Python's Logger to add the `deep()` method for very verbose
    debugging output (level 5).

    Examples
    --------
    >>> logger = TycoonLogger("test")
    >>> logger.setLevel(5)  # DEEP_DEBUG
    >>> logger.deep("Very verbose message")
    """

    def deep(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """
        Log message at DEEP_DEBUG level (5).

        Parameters
        ----------
        msg : str
            Message format string.
        *args : Any
            Arguments for message formatting.
        **kwargs : Any
            Additional logging kwargs.
        """
        if self.isEnabledFor(DEEP_DEBUG):
            self._log(DEEP_DEBUG, msg, args, **kwargs)


# Make the logging module hand out our subclass from now on
logging.setLoggerClass(TycoonLogger)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)


def getLogger(name: str | None = None) -> TycoonLogger:
    """
    Get a TycoonLogger instance.

    Convenience wrapper around logging.getLogger() that returns
    a TycoonLogger instance with DEEP_DEBUG support.

    Parameters
    ----------
    name : str, optional
        Logger name. If None, returns root logger.

    Returns
    -------
    TycoonLogger
        Logger instance with deep() method.
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def configure(log_config: dict[str, Any]) -> None:
    """
    Apply a validated ``logging`` config block to the tycoon loggers.

    Parameters
    ----------
    log_config : dict
        Logging configuration with keys:
        - default_level: str (e.g., 'INFO', 'DEBUG', 'DEEP_DEBUG')
        - systems: dict[str, str] (per-system overrides)
    """
    default_level = log_config.get("default_level", "INFO")
    logging.getLogger("tycoon").setLevel(_level_of(default_level))

    for system_name, level in log_config.get("systems", {}).items():
        logger_name = f"tycoon.systems.{system_name}"
        logging.getLogger(logger_name).setLevel(_level_of(level))


def _level_of(name: str) -> int:
    name = name.upper()
    if name == "DEEP_DEBUG":
        return DEEP_DEBUG
    return int(getattr(logging, name))
