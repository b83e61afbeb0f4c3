# logger_utils.py -  for logging messages and performance metrics, timestamps etc

import os
import time
from datetime import datetime
from typing import Optional

# Directory where all log files will be stored (created on first write)
LOG_DIR = "logs"

# Path to the default log file, can be overriden by env or Log.configure()
DEFAULT_LOG_PATH = os.environ.get("NEXTWORD_LOG_PATH") or os.path.join(LOG_DIR, "nextword.log")


class Log:
    """
    Lightweight logger for writing messages and tracking metrics.

    Shared by the whole package through class-level state, so callers just do
    Log.warning("...") without passing an instance around. Console echo is off by
    default because the TUI owns the terminal; the CLI turns it on with --verbose.
    """
    COLORS = {
        "DEBUG": "\033[90m",   # gray
        "INFO": "\033[94m",    # blue
        "WARNING": "\033[93m", # yellow
        "ERROR": "\033[91m",   # red
        "RESET": "\033[0m",
    }
    LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

    path: str = DEFAULT_LOG_PATH
    echo: bool = False
    use_color: bool = True
    min_level: str = "DEBUG"

    @classmethod
    def configure(cls, path: Optional[str] = None, echo: Optional[bool] = None,
                  use_color: Optional[bool] = None, min_level: Optional[str] = None):
        if path is not None:
            cls.path = path
        if echo is not None:
            cls.echo = echo
        if use_color is not None:
            cls.use_color = use_color
        if min_level is not None:
            if min_level not in cls.LEVELS:
                raise ValueError(f"unknown log level: {min_level}")
            cls.min_level = min_level

    @classmethod
    def _emit(cls, level: str, msg: str):
        """
        Append a log message to the log file with a timestamp.
        Each entry is written as: [YYYY-MM-DD HH:MM:SS] LEVEL   | message
        """
        if cls.LEVELS.index(level) < cls.LEVELS.index(cls.min_level):
            return
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{ts}] {level:<7} | {msg}"

        folder = os.path.dirname(cls.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(cls.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

        if not cls.echo:
            return
        if cls.use_color and level in cls.COLORS:
            print(f"{cls.COLORS[level]}{line}{cls.COLORS['RESET']}")
        else:
            print(line)

    # Public logging methods
    @classmethod
    def debug(cls, msg: str):
        cls._emit("DEBUG", msg)

    @classmethod
    def info(cls, msg: str):
        cls._emit("INFO", msg)

    @classmethod
    def warning(cls, msg: str):
        cls._emit("WARNING", msg)

    @classmethod
    def error(cls, msg: str):
        cls._emit("ERROR", msg)

    @classmethod
    def write(cls, msg: str):
        cls._emit("INFO", msg)

    @classmethod
    def metric(cls, tag, value, unit=""):
        """
        Record a metric (like timing, counts, or performance stats).
        Example line: [12:45:02] predict latency: 0.123s
        """
        cls._emit("DEBUG", f"{tag}: {value}{unit}")

    @staticmethod
    def time_block(label):
        """
        Helper for measuring execution time of a code block.
        To use:
            with Log.time_block("normalize"):
                do_some_work()
        It automatically logs how long the block took.
        """
        return _Timer(label)


class _Timer:
    """Context manager used internally to measure time for a code block."""
    def __init__(self, label):
        self.label = label
        self.start = time.perf_counter()
        self.elapsed = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        """When exiting the 'with' block, calculate how long it took and record it as a metric. """
        self.elapsed = time.perf_counter() - self.start
        Log.metric(f"{self.label} done", round(self.elapsed, 3), "s")
