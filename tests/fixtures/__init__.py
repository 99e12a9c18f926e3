"""
Test fixtures for docrepo tests.

This package provides:
- Mock implementations for external dependencies (MongoDB collections)
- Sample entity models shared across test modules
"""
