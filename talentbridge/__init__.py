"""
TalentBridge recruitment marketplace core.

Commission splitting, application lifecycle and duplicate candidate
detection for a marketplace where recruiters submit candidates to jobs.
"""

__app_name__ = "TalentBridge"
__version__ = "0.1.0"
