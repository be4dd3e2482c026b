"""GitHub REST API client: rate limits, retries, refs, trees and contents."""

from .contents import ContentFetcher, decode_content
from .fetcher import HttpRequest, RawResponse, ResilientFetcher, urllib_transport
from .ratelimit import RateLimitSnapshot, RateLimitTracker
from .resolver import RepositoryResolver
from .tree import TreeScanner, build_file_kind

__all__ = [
    "ContentFetcher",
    "HttpRequest",
    "RateLimitSnapshot",
    "RateLimitTracker",
    "RawResponse",
    "RepositoryResolver",
    "ResilientFetcher",
    "TreeScanner",
    "build_file_kind",
    "decode_content",
    "urllib_transport",
]
