"""
Shared exception definitions for all stores.

Hierarchy:
- StoreError (base for all store exceptions)
  - KeyValueStoreError (blob store errors)
  - ContentError (puzzle content files)
"""


# =========================
# Base exception
# =========================

class StoreError(Exception):
    """Base exception for all store-related errors."""
    retryable: bool = True


class UnexpectedResult(StoreError):
    retryable = True
    # the "how did this happen" exception, e.g. a backend returning a non-string blob


# =========================
# KeyValueStore exceptions
# =========================

class KeyValueStoreError(StoreError):
    """Base exception for key-value store errors."""
    retryable = True


class StoreClosed(KeyValueStoreError):
    retryable = False


class InvalidKey(KeyValueStoreError):
    retryable = False


# =========================
# Content exceptions
# =========================

class ContentError(StoreError):
    """Puzzle content could not be read. Recovered with the fallback puzzle."""
    retryable = False


class ContentNotFound(ContentError):
    retryable = False


class MalformedContent(ContentError):
    retryable = False
