"""
Unit Tests - Testing Individual Components in Isolation.

Retry waits use a recording sleep and collaborators a memory sink, so
unit tests never wait on timers or touch the console.

Test Files:
    - test_errors.py: Error taxonomy and normalization
    - test_event_log.py: Bounded event log
    - test_retry_orchestrator.py: Retry with backoff and jitter
    - test_recovery_registry.py: Recovery strategies
    - test_coordinator.py: Coordinator facade
    - test_config_loader.py: Configuration loading/validation
    - test_sinks.py: Console, file and memory sinks
"""
