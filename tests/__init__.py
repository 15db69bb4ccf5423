"""
Unit Tests for Rookery

This package contains unit tests for all engine components.

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_search.py

    # Run specific test
    pytest tests/test_search.py::TestNegamax::test_mate_in_one

Dependencies:
    - pytest: Test framework
    - chess (python-chess): Reference move generator for cross-checks
"""
