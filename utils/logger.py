import os
import sys
from datetime import date
from loguru import logger

LOG_DIR = os.getenv("LOG_DIR", "logs/")


def logging_setup(log_dir: str = LOG_DIR, level: str = "INFO"):

    format_info = "<green>{time:HH:mm:ss.SS}</green> | <blue>{level:<8}</blue> | <level>{message}</level>"
    format_info_logfile = "{time:HH:mm:ss.SS} | {level:<8} | {name}:{function}:{line:<8} | {message}"

    logger.remove()

    if log_dir:
        logger.add(os.path.join(log_dir, f"out_{date.today().strftime('%m-%d')}.log"),
                   format=format_info_logfile)
    logger.add(sys.stdout, colorize=True, format=format_info, level=level)


logging_setup()
