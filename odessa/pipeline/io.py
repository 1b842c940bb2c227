import re
from datetime import datetime, timedelta

from odessa import config

TIMESTAMP_RE = re.compile(r"^\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\]")
RUN_SEPARATOR = "\n--- New Run ---\n"


def trim_log_by_time(log_path, retention_days=config.LOG_RETENTION_DAYS):
    """
    Drop run-log entries older than retention_days.

    An entry starts at a timestamped line; untimestamped lines that follow
    belong to it and share its fate.
    """
    if not log_path.exists():
        return []

    cutoff = datetime.utcnow() - timedelta(days=retention_days)
    keep = False
    kept = []
    for line in log_path.read_text().splitlines(keepends=True):
        stamp = TIMESTAMP_RE.match(line)
        if stamp:
            keep = datetime.strptime(stamp.group(1), "%Y-%m-%d %H:%M:%S") >= cutoff
        if keep:
            kept.append(line)
    return kept


def write_run_log(log_lines, log_path=None, retention_days=config.LOG_RETENTION_DAYS):
    """Rewrite the run log: retained history, a separator, then this run."""
    log_path = log_path or config.LOG_PATH
    history = trim_log_by_time(log_path, retention_days=retention_days)

    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_path.write_text("".join(history) + RUN_SEPARATOR + "".join(f"{line}\n" for line in log_lines))
    return log_path
