"""
Integration Tests - End-to-End Error Handling Flow.

These tests wire a coordinator from configuration with real sinks and
drive failures through retry, logging, recovery and statistics.

Test Files:
    - test_error_handling_flow.py: Full handling workflow
"""
