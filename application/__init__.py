"""
Application Services Layer

Orchestrates domain objects and coordinates use cases.
"""

from .account_service import AccountService, AccountServiceConfig
from .authorization import LinkAuthorizer
from .dependency_container import DependencyContainer
from .link_service import LinkService
from .upload_service import UploadService

__all__ = [
    'AccountService',
    'AccountServiceConfig',
    'LinkAuthorizer',
    'DependencyContainer',
    'LinkService',
    'UploadService',
]
