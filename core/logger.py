"""
Configure the logger for the library admin service
"""

import logging
from core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty at DEBUG, only their warnings are kept
QUIET_LOGGERS = ("boto3", "botocore", "urllib3", "python_multipart")

logging.basicConfig(level=get_settings().LOG_LEVEL, format=LOG_FORMAT)
for name in QUIET_LOGGERS:
    logging.getLogger(name).setLevel(logging.WARNING)

logger = logging.getLogger("library_admin")
