"""
Clock engine, lap ledger and session orchestration.

The session wraps the engine and ledger, persists every mutation and
notifies observers; the engine and ledger hold the state rules themselves.
"""
