"""
LapTimer App - Stopwatch and Lap Ledger Core

A personal stopwatch core that tracks elapsed time, records named laps and
persists the whole session to a key-value store so it survives restarts.
Rendering is left to whatever presentation layer subscribes to the session.
"""

__version__ = "0.1.0"
__author__ = "LapTimer Team"
