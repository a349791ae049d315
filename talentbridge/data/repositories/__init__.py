"""
Data access for TalentBridge.

Storage contracts used by the workflow core, their MongoDB
implementations and in-process implementations.
"""

# Contracts
from .interfaces import ApplicationStore, JobStore

# MongoDB repositories
from .base import BaseRepository
from .application_repository import ApplicationRepository, get_application_repository
from .job_repository import JobRepository, get_job_repository

# In-process stores
from .memory import InMemoryApplicationStore, InMemoryJobStore

__all__ = [
    # Contracts
    "ApplicationStore",
    "JobStore",
    # Base
    "BaseRepository",
    # Application
    "ApplicationRepository",
    "get_application_repository",
    # Job
    "JobRepository",
    "get_job_repository",
    # In-process
    "InMemoryApplicationStore",
    "InMemoryJobStore",
]
