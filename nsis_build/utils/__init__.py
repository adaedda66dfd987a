"""
Utilities module - Logging and the exception hierarchy
"""

from .logger import get_logger, configure_logging, configure_logging_from_env

from .exceptions import (
    # Base
    BuildError,
    # Configuration
    ConfigurationError,
    # Graph
    GraphError,
    DuplicateTaskError,
    UnknownTaskError,
    CyclicDependencyError,
    # Requirements
    MissingRequirementError,
    # External operations
    ExternalOperationError,
    NetworkError,
    ArchiveError,
    FileOperationError,
    PackagingError,
    PublishError,
    # Utilities
    wrap_exception,
)

__all__ = [
    'get_logger',
    'configure_logging',
    'configure_logging_from_env',

    # Exception hierarchy
    'BuildError',
    'ConfigurationError',
    'GraphError',
    'DuplicateTaskError',
    'UnknownTaskError',
    'CyclicDependencyError',
    'MissingRequirementError',
    'ExternalOperationError',
    'NetworkError',
    'ArchiveError',
    'FileOperationError',
    'PackagingError',
    'PublishError',
    'wrap_exception',
]
