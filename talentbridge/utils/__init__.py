"""
Utility modules for TalentBridge.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Application-wide constants
"""

from talentbridge.utils.config import (
    AppSettings,
    CommissionSettings,
    WorkflowSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
    PACKAGE_DIR,
    DATA_DIR,
)
from talentbridge.utils.constants import (
    APP_NAME,
    APP_DISPLAY_NAME,
    VERSION,
    ApplicationStatus,
    AuditAction,
    CommissionType,
    JobStatus,
    ValidationCode,
)
from talentbridge.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
)

__all__ = [
    # Config
    "AppSettings",
    "CommissionSettings",
    "WorkflowSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    "PACKAGE_DIR",
    "DATA_DIR",
    # Constants
    "APP_NAME",
    "APP_DISPLAY_NAME",
    "VERSION",
    "ApplicationStatus",
    "AuditAction",
    "CommissionType",
    "JobStatus",
    "ValidationCode",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
]
