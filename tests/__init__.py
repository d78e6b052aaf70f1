"""
Test Suite for Snippet Resilience.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: End-to-end tests through create_coordinator
    - fixtures/: Shared test configuration

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest tests/integration/               # Integration tests only
    pytest --cov=src/snippet_resilience     # With coverage
"""
