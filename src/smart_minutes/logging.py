import logging
import sys

from pythonjsonlogger import jsonlogger


def setup_logging():
    """
    Configures structured JSON logging for the minutes service.

    Installs a JSON formatter carrying timestamp, level, logger name, message,
    trace_id and span_id on the root logger and on the Uvicorn loggers, so
    pipeline events and HTTP access logs share one format.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
    )
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers = []
    root_logger.addHandler(stream_handler)

    for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        u_logger = logging.getLogger(logger_name)
        u_logger.setLevel(logging.INFO)
        u_logger.handlers = []
        u_logger.addHandler(stream_handler)
        u_logger.propagate = False

    return root_logger
