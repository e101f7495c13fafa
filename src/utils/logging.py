"""
Structured Logging for Grafana Loki

All logs are JSON with consistent, queryable fields.
Query logs by: module, action, route, contract_id, etc.

GRAFANA LOKI QUERIES
====================
# All errors
{project="trakt"} | json | level="ERROR"

# Classification failures (request-level breaks)
{project="trakt"} | json | module="agent" action="classify_failed"

# Which branch each chat turn took
{project="trakt"} | json | module="graph" action="run_done"

# Escrow generations that produced no contract
{project="trakt"} | json | module="nodes" action="escrow_no_contract"

# Provider fallbacks (primary endpoint unavailable)
{project="trakt"} | json | module="llm" action=~".*_fallback"

# Deployment verifications
{project="trakt"} | json | module="github"

USAGE
=====
from src.utils.logging import log, get_logger, configure_logging

logger = get_logger()
log.info(logger, "graph", "run_start", "Conversation turn started",
         input_length=len(text), history_turns=len(history))

log.error(logger, "nodes", "escrow_failed", "Escrow generation failed",
          error=str(e), error_type=type(e).__name__)

ACTION NAMING
=============
Consistent suffixes for queryable actions:
  *_start    : beginning of an operation
  *_done     : successful completion
  *_failed   : error/failure
  *_skipped  : intentionally skipped
  *_fallback : falling back to alternative path
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional


class StructuredFormatter(logging.Formatter):
    """JSON formatter for Grafana Loki."""

    def __init__(self, pretty: bool = False):
        super().__init__()
        self.pretty = pretty

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()

        # Structured log (emitted via StructuredLogger)
        if hasattr(record, "_structured") and record._structured:
            data = {
                "ts": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
                "level": record.levelname,
                "module": record._module,
                "action": record._action,
                "msg": msg,
            }
            for key, value in record._extra.items():
                if value is not None:
                    data[key] = value

            if self.pretty:
                return self._pretty(data)
            return json.dumps(data, default=str, separators=(",", ":"))

        # Third-party log: wrap in JSON so Promtail can still parse it
        if self.pretty:
            return msg
        return json.dumps(
            {
                "ts": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
                "level": record.levelname,
                "module": "legacy",
                "action": "log",
                "msg": msg,
            },
            default=str,
            separators=(",", ":"),
        )

    def _pretty(self, data: dict) -> str:
        """Human-readable format for development."""
        ts = data["ts"][11:23]
        lvl = data["level"][0]
        mod = data["module"].upper()[:10].ljust(10)
        act = data["action"]
        msg = data["msg"]

        skip = {"ts", "level", "module", "action", "msg"}
        ctx = " ".join(f"{k}={v}" for k, v in data.items() if k not in skip)

        return f"{ts} {lvl} [{mod}] {act}: {msg}" + (f" | {ctx}" if ctx else "")


class StructuredLogger:
    """
    Centralized structured logging.

    All methods accept a stdlib logging.Logger, module name, action name,
    message, and arbitrary context fields.
    """

    def _log(
        self,
        logger: logging.Logger,
        level: int,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        extra = {
            "_structured": True,
            "_module": module,
            "_action": action,
            "_extra": {k: v for k, v in kwargs.items() if v is not None},
        }
        logger.log(level, msg, extra=extra)

    def info(self, logger: logging.Logger, module: str, action: str, msg: str, **kwargs) -> None:
        """Log INFO level."""
        self._log(logger, logging.INFO, module, action, msg, **kwargs)

    def warning(self, logger: logging.Logger, module: str, action: str, msg: str, **kwargs) -> None:
        """Log WARNING level."""
        self._log(logger, logging.WARNING, module, action, msg, **kwargs)

    def error(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        error: Optional[str] = None,
        error_type: Optional[str] = None,
        **kwargs,
    ) -> None:
        """Log ERROR level."""
        self._log(
            logger, logging.ERROR, module, action, msg,
            error=error, error_type=error_type, **kwargs,
        )

    def debug(self, logger: logging.Logger, module: str, action: str, msg: str, **kwargs) -> None:
        """Log DEBUG level."""
        self._log(logger, logging.DEBUG, module, action, msg, **kwargs)


# Singleton instance: import this everywhere
log = StructuredLogger()

_app_logger = None


def get_logger() -> logging.Logger:
    """Get the shared application logger."""
    global _app_logger
    if _app_logger is None:
        _app_logger = logging.getLogger("trakt.app")
    return _app_logger


def configure_logging() -> None:
    """Configure root logger with structured formatter. Call once at startup.

    Reads from environment:
      LOG_FORMAT: "json" (default, for Loki) or "pretty" (for development)
      LOG_LEVEL: "INFO" (default), "DEBUG", "WARNING", "ERROR"
    """
    pretty = os.environ.get("LOG_FORMAT", "json") == "pretty"
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter(pretty=pretty))

    logging.basicConfig(
        level=level,
        handlers=[handler],
        force=True,
    )

    # LangChain / LangGraph: extremely chatty at DEBUG
    logging.getLogger("langchain").setLevel(logging.WARNING)
    logging.getLogger("langchain_core").setLevel(logging.WARNING)
    logging.getLogger("langchain_openai").setLevel(logging.WARNING)
    logging.getLogger("langgraph").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    # HTTP clients
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    # SQLAlchemy
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
