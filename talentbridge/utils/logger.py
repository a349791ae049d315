"""
Loguru sinks for TalentBridge.

Status changes, submissions, commission edits and payouts are also
written to ``audit.log`` next to the main log file.
"""

import sys
from typing import Any

from loguru import logger

from talentbridge.utils.config import get_settings

# Substrings of detail keys whose values never reach the audit trail
REDACTED_KEY_PARTS = frozenset(
    {"password", "secret", "token", "api_key", "credential", "email", "phone", "ctc"}
)


def setup_logging() -> None:
    """Replace loguru's default sink with the configured console, file and audit sinks."""
    settings = get_settings()
    log_settings = settings.logging

    logger.remove()

    # Variable values in tracebacks can hold candidate contact details
    enable_diagnose = settings.debug and settings.environment == "development"

    if log_settings.console_output:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>",
            level=log_settings.level,
            colorize=True,
            backtrace=True,
            diagnose=enable_diagnose,
        )

    if log_settings.file_output:
        log_file = log_settings.file_path
        log_file.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            format=log_settings.format,
            level=log_settings.level,
            rotation=log_settings.rotation,
            retention=log_settings.retention,
            compression="zip",
            backtrace=True,
            diagnose=enable_diagnose,
            enqueue=True,
        )

        logger.add(
            log_file.parent / "audit.log",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[audit_type]} | {message}",
            level="INFO",
            filter=lambda record: "audit_type" in record["extra"],
            rotation="1 week",
            retention="1 year",
            compression="zip",
            enqueue=True,
        )

    logger.info(f"Logging initialized - Level: {log_settings.level}")


def get_logger(name: str) -> Any:
    """Module logger; ``name`` ends up in ``record["extra"]``."""
    return logger.bind(name=name)


def _sanitize_for_logging(data: Any) -> Any:
    if isinstance(data, dict):
        return {
            k: "***REDACTED***"
            if any(part in k.lower() for part in REDACTED_KEY_PARTS)
            else _sanitize_for_logging(v)
            for k, v in data.items()
        }
    elif isinstance(data, list):
        return [_sanitize_for_logging(item) for item in data]
    return data


def audit_log(
    action: str,
    details: dict[str, Any],
    audit_type: str = "STATUS",
) -> None:
    """
    Write one audit-trail line.

    ``audit_type`` is one of STATUS, SUBMISSION, COMMISSION or PAYOUT and
    routes the record to the audit sink. Candidate contact fields in
    ``details`` are redacted.
    """
    logger.bind(audit_type=audit_type).info(f"{action} | {_sanitize_for_logging(details)}")
