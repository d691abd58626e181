"""
Fake implementations for testing.

Fakes implement the same interfaces as the real components with simplified
in-process logic, so tests run without a database, network or worker thread.

Key fakes:
- InMemoryArticleStorage: article storage backed by dicts
- SyncTaskManager: processes submitted tasks immediately in the caller
- FakeExtractor: canned extraction results or failures
- ScriptedProvider: summary provider with scripted responses
"""

from fakes.extractor import FakeExtractor
from fakes.providers import ScriptedProvider
from fakes.storage import InMemoryArticleStorage
from fakes.task_manager import SyncTaskManager

__all__ = [
    "FakeExtractor",
    "InMemoryArticleStorage",
    "ScriptedProvider",
    "SyncTaskManager",
]
