import logging
import os
from logging.handlers import TimedRotatingFileHandler

from orderpack import config

logger = logging.getLogger("orderpack")
logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

if config.LOG_FILE:
    log_dir = os.path.dirname(config.LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=config.LOG_FILE,
        when='midnight',
        interval=1,
        backupCount=7,
        encoding='utf-8'
    )
else:
    handler = logging.StreamHandler()

formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
handler.setFormatter(formatter)

if not logger.handlers:
    logger.addHandler(handler)
