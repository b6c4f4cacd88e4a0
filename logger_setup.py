# logger_setup.py

import logging
import os

LOGGER_NAME = "nbody_sim"
LOG_FILE_NAME = 'simulation.log'
FALLBACK_FORMAT = "%(levelname)s - %(message)s"


def _make_handlers(log_file: str, formatter: logging.Formatter):
    """File handler for the run directory plus a console handler."""
    file_handler = logging.FileHandler(log_file)
    stream_handler = logging.StreamHandler()
    for handler in (file_handler, stream_handler):
        handler.setFormatter(formatter)
    return [file_handler, stream_handler]


def _replace_handlers(logger: logging.Logger, handlers):
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    for handler in handlers:
        logger.addHandler(handler)


def setup_logging(config: dict, log_root='runs'):
    """
    Sets up the "nbody_sim" logger for one run.

    Uses the 'run_id' and 'logging' sections of an already loaded
    configuration and sends the application's records to the console and to
    <log_root>/<run_id>/simulation.log. Only the application logger is
    configured, so Numba's compiler output does not end up in the run log.

    Data Contract:
    - Inputs:
        - config (dict): Configuration returned by config_loader.load_config.
        - log_root (str): Directory holding one sub-directory per run.
    - Outputs: The configured logging.Logger.
    - Side Effects: Creates the run directory. Replaces any handlers already
      attached to the "nbody_sim" logger.
    - Invariants: config contains 'run_id' and a 'logging' dictionary with
      'level' and 'format'. load_config guarantees this.
    """
    run_id = config['run_id']
    log_config = config['logging']

    log_dir = os.path.join(log_root, run_id)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, LOG_FILE_NAME)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_config['level'])
    logger.propagate = False
    _replace_handlers(logger, _make_handlers(log_file, logging.Formatter(log_config['format'])))

    logger.info(f"Logging initialized. Run ID: {run_id}. Log file: {log_file}")
    return logger


def setup_fallback_logging():
    """
    Console-only logging for startup failures, used when the configuration
    could not be loaded and there is no run directory to log into.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(FALLBACK_FORMAT))
        logger.addHandler(handler)
    return logger
