import sys

from loguru import logger

from reposync.config.logging_config import LoggingConfig

logger.configure(extra={"name": "reposync"})

def setup_logging(logging_config=None):
    """Replace every loguru sink with the ones described by ``logging_config``."""
    if logging_config is None:
        logging_config = LoggingConfig()
    logger.remove()
    sink_ids = []
    if logging_config.console:
        sink_ids.append(logger.add(sys.stderr, format=logging_config.log_format, level=logging_config.log_level, catch=True))
    if logging_config.log_file:
        sink_ids.append(logger.add(logging_config.log_file, format=logging_config.log_format, level=logging_config.log_level, rotation=logging_config.log_rotation, retention=logging_config.log_retention, compression=logging_config.log_compression, catch=True))
    return sink_ids

class Logger:
    def __init__(self, name):
        self.name = name

    def debug(self, msg, *args, **kwargs):
        logger.bind(name=self.name).opt(depth=1, exception=False).debug(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        logger.bind(name=self.name).opt(depth=1, exception=False).info(msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        logger.bind(name=self.name).opt(depth=1, exception=False).warning(msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        logger.bind(name=self.name).opt(depth=1, exception=False).error(msg, *args, **kwargs)

    def critical(self, msg, *args, **kwargs):
        logger.bind(name=self.name).opt(depth=1, exception=False).critical(msg, *args, **kwargs)

    def exception(self, msg, *args, **kwargs):
        logger.bind(name=self.name).opt(depth=1, exception=True).error(msg, *args, **kwargs)

    def log(self, level, msg, *args, **kwargs):
        logger.bind(name=self.name).opt(depth=1, exception=False).log(level, msg, *args, **kwargs)
