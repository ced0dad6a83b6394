import sys
from loguru import logger

from config import LOG_LEVEL, LOG_TO_FILE, LOG_FILE_PATH


class JsonLogger:
    def __init__(self):
        self.logger = logger
        self._configure_logger()

    def _configure_logger(self):
        self.logger.remove()  # Remove default handler

        format_string = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

        self.logger.add(
            sys.stdout,
            level=LOG_LEVEL,
            format=format_string,
            serialize=False,
            enqueue=True  # Use a queue for non-blocking logging
        )
        if LOG_TO_FILE:
            self.logger.add(
                LOG_FILE_PATH,
                level=LOG_LEVEL,
                format=format_string,
                serialize=False,
                rotation="10 MB",  # Rotate file after 10 MB
                compression="zip",
                enqueue=True
            )

    def bind_context(self, **kwargs):
        """Bind context variables to the logger."""
        return self.logger.bind(**kwargs)


# Initialize the logger
json_logger = JsonLogger().logger
