"""
Log Store Package - Access to the paginated remote log store

Package Structure:
- models: Catalog entities, search criteria, pages
- errors: Failure taxonomy and ErrorClassifier
- paginator: PaginatedFetcher
- client: HTTP client (blocking and async facade)
"""
from .models import LogGroup, LogStream, LogEvent, SearchCriteria, Page, effective_limit
from .errors import (
    ErrorKind,
    LogStoreError,
    AuthFailed,
    PermissionDenied,
    NotFound,
    ValidationFailed,
    TransientFailure,
    FetchFailed,
    classify,
    describe,
    http_status_for,
)
from .paginator import PaginatedFetcher
from .client import LogStoreClient, AsyncLogStoreClient

__all__ = [
    # Models
    'LogGroup',
    'LogStream',
    'LogEvent',
    'SearchCriteria',
    'Page',
    'effective_limit',

    # Errors
    'ErrorKind',
    'LogStoreError',
    'AuthFailed',
    'PermissionDenied',
    'NotFound',
    'ValidationFailed',
    'TransientFailure',
    'FetchFailed',
    'classify',
    'describe',
    'http_status_for',

    # Access
    'PaginatedFetcher',
    'LogStoreClient',
    'AsyncLogStoreClient',
]
