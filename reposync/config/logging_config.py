from dataclasses import dataclass
from typing import Optional

@dataclass
class LoggingConfig:
    log_file: Optional[str] = None
    log_format: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} {level} {extra[name]} {function}:{line} {message}"
    log_level: str = "INFO"
    log_rotation: str = "50 MB"
    log_retention: str = "10 days"
    log_compression: str = "zip"
    console: bool = True

    def get_config(self):
        return self.__dict__

LOGGING_CONFIG = LoggingConfig()
