import logging
import re
from datetime import datetime
from pathlib import Path

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ERROR_LOG_PATTERN = "dms_errors_*.log"
KEEP_ERROR_LOGS = 10

_BEARER = re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=|-]+")
_TOKEN_FIELD = re.compile(r"""(['"]?token['"]?\s*[:=]\s*['"]?)[A-Za-z0-9._~+/=|-]+""", re.IGNORECASE)


def redact(text: str) -> str:
    text = _BEARER.sub(r"\1***", text)
    return _TOKEN_FIELD.sub(r"\1***", text)


class RedactTokenFilter(logging.Filter):
    """Masks bearer tokens in log records before any handler formats them."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


class LazyFileHandler(logging.Handler):
    """Creates the error log file only when the first record arrives."""

    def __init__(self, log_dir: Path, level: int = logging.ERROR, keep: int = KEEP_ERROR_LOGS):
        super().__init__(level)
        self.log_dir = Path(log_dir)
        self.keep = keep
        self.file_handler: logging.FileHandler | None = None
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    @property
    def log_file(self) -> Path:
        return self.log_dir / f"dms_errors_{self.timestamp}.log"

    def emit(self, record):
        if self.file_handler is None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            prune_error_logs(self.log_dir, self.keep - 1)
            self.file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            self.file_handler.setLevel(self.level)
            self.file_handler.setFormatter(self.formatter)

        self.file_handler.emit(record)

    def close(self):
        if self.file_handler:
            self.file_handler.close()
        super().close()


def prune_error_logs(log_dir: Path, keep: int) -> list[Path]:
    """Delete all but the newest ``keep`` error logs. Returns what was removed."""
    logs = sorted(Path(log_dir).glob(ERROR_LOG_PATTERN))
    stale = logs[: max(len(logs) - max(keep, 0), 0)]
    removed = []
    for path in stale:
        try:
            path.unlink()
            removed.append(path)
        except OSError as e:
            logging.warning(f"Could not remove old error log {path}: {e}")
    return removed


def setup_logging(log_dir: Path | None = None, level: int = logging.INFO) -> None:
    if log_dir is None:
        log_dir = Path(__file__).parent.parent / "logs"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if root_logger.handlers:
        root_logger.handlers.clear()

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)
    redaction = RedactTokenFilter()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(redaction)
    root_logger.addHandler(console_handler)

    lazy_error_handler = LazyFileHandler(log_dir, level=logging.ERROR)
    lazy_error_handler.setFormatter(formatter)
    lazy_error_handler.addFilter(redaction)
    root_logger.addHandler(lazy_error_handler)

    # requests logs every connection at DEBUG through urllib3
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logging.info(f"Logging initialized. Error logs go to {log_dir} on first error.")
