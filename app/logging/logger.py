import logging
import sys

# Libraries that log every request or page at DEBUG/INFO and drown the pipeline output.
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "pdfminer", "PIL")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(message)s"


class Log:
    """Process-wide 'docsdb' logger.

    Messages are plain f-strings; `**kwargs` land in the record's extra so a
    structured handler can pick them up (e.g. Log.info("...", job_id=3)).
    """

    _logger: logging.Logger = logging.getLogger("docsdb")

    @classmethod
    def configure(cls, log_level: str, library_level: str = "WARNING") -> None:
        """Attach a stdout handler once and set levels for ours and third-party loggers."""
        cls._logger.setLevel(log_level.upper())
        cls._logger.propagate = False
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            cls._logger.addHandler(handler)
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(library_level.upper())

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def exception(cls, message: str, **kwargs: object) -> None:
        """Error with the active exception's traceback; call from an except block."""
        cls._logger.exception(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra=kwargs)
