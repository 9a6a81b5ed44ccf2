"""
Test suite for the Executive Dashboard API.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_taxonomy_service.py -v
"""
