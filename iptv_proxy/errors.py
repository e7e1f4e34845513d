"""
Error types raised by the synchronization pipeline.
"""


class ProxyError(Exception):
    """Base class for all pipeline errors"""
    pass


class FetchFailed(ProxyError):
    """Raised when the channel catalog cannot be retrieved or decoded"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CacheCorrupt(ProxyError):
    """Raised when the cache file exists but cannot be decoded"""
    pass


class ChannelGenerationError(ProxyError):
    """Raised when a single channel cannot be turned into output"""
    pass


class ProgrammeGenerationError(ProxyError):
    """Raised when a single programme cannot be turned into output"""
    pass
