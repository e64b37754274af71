"""Shared testing fixtures for the sprout-quiz test suite."""

from .openai import ChatClientStub, RecordingExtractor  # noqa: F401

__all__ = ["ChatClientStub", "RecordingExtractor"]
