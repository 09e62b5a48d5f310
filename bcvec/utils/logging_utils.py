import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level=logging.INFO,
    verbose: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> Optional[logging.FileHandler]:
    """Console logging, plus a copy of every record in ``log_file`` when given.

    Returns the file handler so callers can detach it, or None.
    """
    log_level = logging.DEBUG if verbose else level
    logging.basicConfig(level=log_level, format=LOG_FORMAT, stream=sys.stdout)
    # Quiet down the I/O libraries
    logging.getLogger("pyogrio").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if log_file is None:
        return None
    log_file = Path(log_file).absolute()
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_file:
            return handler
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    return handler
