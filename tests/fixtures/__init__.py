"""Test fixtures for the Light File Manager.

This package provides reusable test fixtures:
- core: Deterministic clock, ids, node stores, engines and sessions
- local: A small served directory on disk and its LocalDirectoryService
- api: TestClient wired to the file server app
"""
