import logging
import sys


class Log:
    """Centralized logging for reconciliation and redaction runs."""

    _logger: logging.Logger = logging.getLogger("cardrecon")

    # httpx logs every request at INFO; one line per OCR call drowns the run log.
    _NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "PIL")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Attach a stdout handler at the given level and quiet chatty libraries."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)
        for name in cls._NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def exception(cls, message: str, **kwargs: object) -> None:
        """Log an error with the active exception's traceback at DEBUG detail."""
        cls._logger.error(message, extra=kwargs, exc_info=cls._logger.isEnabledFor(logging.DEBUG))

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
