"""Game domain services: card supply, roster, rounds, judging and timers.

This package contains the lobby rules that Socket.IO handlers call into,
keeping transport concerns separated from core game mechanics. Nothing in
here emits to clients except the round-over scheduler.
"""
