import sys
import os
from loguru import logger

# Flag to track if logging has been configured
_logging_configured = False


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def setup_logging(level=None, suppress_console=None, enable_file_logging=None, force=False):
    """
    Configures the global logger.

    Console logging goes to stderr so it never mixes with command output.
    File logging is opt-in via MCMOD_FILE_LOGGING=1 or enable_file_logging=True.

    Args:
        level: Console level. If None, read MCMOD_LOG_LEVEL (default: WARNING).
        suppress_console: If True, no console sink. If None, check MCMOD_QUIET.
        enable_file_logging: If True, log to the global config dir. If None, check MCMOD_FILE_LOGGING.
        force: Reconfigure even if logging was already set up.
    """
    global _logging_configured

    # Only configure once to avoid duplicate handlers
    if _logging_configured and not force:
        return
    _logging_configured = True

    logger.remove()

    if level is None:
        level = os.getenv("MCMOD_LOG_LEVEL", "WARNING").upper()

    if suppress_console is None:
        suppress_console = _env_flag("MCMOD_QUIET")

    if not suppress_console:
        logger.add(
            sys.stderr,
            level=level,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
            colorize=True
        )

    if enable_file_logging is None:
        enable_file_logging = _env_flag("MCMOD_FILE_LOGGING")

    if enable_file_logging:
        from mcmod.paths import global_config_dir
        log_dir = global_config_dir() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "mcmod.log",
            level="DEBUG",
            rotation="5 MB",
            retention="7 days",
            compression="gz",
            catch=True,
            serialize=False
        )


# Configure the logger on import (env vars decide console level and file sink)
setup_logging()
