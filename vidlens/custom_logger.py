from loguru import logger
import sys

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


class LoggerManager:
    def __init__(self):
        self.console_sink_id = None
        self.file_sink_id = None

        # Always remove the default handler
        logger.remove()

    def enable_console(self, level: str = "INFO"):
        # stdout carries the MCP stdio transport, so console logs go to stderr
        if self.console_sink_id is None:
            self.console_sink_id = logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=True)

    def disable_console(self):
        if self.console_sink_id is not None:
            logger.remove(self.console_sink_id)
            self.console_sink_id = None

    def enable_file(self, path: str, level: str = "INFO", rotation: str = "10 MB", retention_days: int = 7):
        if self.file_sink_id is None:
            self.file_sink_id = logger.add(
                path,
                level=level,
                format=LOG_FORMAT,
                rotation=rotation,
                retention=f"{retention_days} days",
            )

    def disable_file(self):
        if self.file_sink_id is not None:
            logger.remove(self.file_sink_id)
            self.file_sink_id = None

    def configure(self, config):
        """Apply a LoggingConfig: console sink at the configured level plus optional file sink."""
        self.disable_console()
        self.enable_console(level=config.level.upper())
        self.disable_file()
        if config.enable_file_logging and config.log_file:
            self.enable_file(
                config.log_file,
                level=config.level.upper(),
                rotation=config.max_file_size,
                retention_days=config.retention_days,
            )

    def get_logger(self):
        return logger


log_manager = LoggerManager()
