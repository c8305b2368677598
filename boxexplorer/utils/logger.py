import datetime
import logging
import os
import sys

import termcolor

from boxexplorer.utils.resource_loader import get_log_dir

LOG_LEVEL_ENV = "BOX_EXPLORER_LOG_LEVEL"

COLORS = {
    "WARNING": "yellow",
    "INFO": "white",
    "DEBUG": "blue",
    "CRITICAL": "red",
    "ERROR": "red",
}


class ColoredFormatter(logging.Formatter):
    def __init__(self, fmt, use_color=True):
        logging.Formatter.__init__(self, fmt)
        self.use_color = use_color

    def format(self, record):
        levelname = record.levelname
        if self.use_color and levelname in COLORS:

            def colored(text):
                return termcolor.colored(
                    text,
                    color=COLORS[levelname],
                    attrs=["bold"],
                )

            record.levelname2 = colored("{:<7}".format(record.levelname))
            record.message2 = colored(record.getMessage())
            asctime2 = datetime.datetime.fromtimestamp(record.created)
            record.asctime2 = termcolor.colored(str(asctime2), color="green")
            record.module2 = termcolor.colored(record.module, color="cyan")
            record.funcName2 = termcolor.colored(record.funcName, color="cyan")
            record.lineno2 = termcolor.colored(str(record.lineno), color="cyan")
        else:
            record.levelname2 = "{:<7}".format(record.levelname)
            record.message2 = record.getMessage()
            record.module2 = record.module
            record.funcName2 = record.funcName
            record.lineno2 = str(record.lineno)
        return logging.Formatter.format(self, record)


def _resolve_level() -> int:
    name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    return getattr(logging, name, logging.INFO)


def _add_file_handler(target: logging.Logger) -> None:
    # Console logging still works when the log directory is not writable.
    try:
        log_dir = get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        current_date = datetime.datetime.now().strftime("%Y-%m-%d")
        file_handler = logging.FileHandler(
            log_dir / f"boxexplorer_{current_date}.log", encoding="utf-8"
        )
    except OSError:
        return
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(module)s:%(funcName)s:%(lineno)d - %(message)s"
        )
    )
    target.addHandler(file_handler)


logger = logging.getLogger("boxexplorer")
logger.setLevel(_resolve_level())

if not logger.handlers:
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(
        ColoredFormatter(
            "%(asctime)s [%(levelname2)s] %(module2)s:%(funcName2)s:%(lineno2)s"
            " - %(message2)s",
            use_color=sys.stderr.isatty(),
        )
    )
    logger.addHandler(stream_handler)
    _add_file_handler(logger)
