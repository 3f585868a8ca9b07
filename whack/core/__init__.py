"""Core engine primitives (clock, ordered event queue, journal events).

Kept free of game rules so the scheduling behaviour can be tested on its own.
"""
