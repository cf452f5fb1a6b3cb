import logging
import sys

from pythonjsonlogger import jsonlogger

from traindb.core.environment import get_log_level


def setup_logging():
    """
    Configures centralized JSON logging to stdout.

    Every record carries `service=traindb`. SQL statements are only logged when
    LOG_LEVEL=DEBUG; otherwise the database driver and transport layers stay at WARNING.
    """
    level = get_log_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Prevent duplicate logs when called more than once
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_handler = logging.StreamHandler(sys.stdout)
    formatter = jsonlogger.JsonFormatter(
        fmt='%(asctime)s %(levelname)s %(name)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%SZ',
        rename_fields={'levelname': 'level', 'name': 'logger'},
        static_fields={'service': 'traindb'},
    )
    log_handler.setFormatter(formatter)
    root_logger.addHandler(log_handler)

    sql_level = logging.INFO if level == "DEBUG" else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    root_logger.info("Logging initialized", extra={'log_level': level})
