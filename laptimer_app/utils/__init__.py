"""
Utility functions module.

Elapsed-time formatting and timestamp helpers shared by the ledger, the
session store codec and the command-line harness.
"""
