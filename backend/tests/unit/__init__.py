"""
Unit Tests

Unit tests run in isolation without external dependencies.
All external services (LLM providers, storage) are mocked or in-memory.
"""
