"""
Flipmatch - Single-player memory game engine

A square board of face-down cards, every value dealt twice. The engine
provides:
- Deck generation
- A reducer-driven game state machine (flip, resolve, win/lose)
- Generation-tagged reveal timers
- Session management, an HTTP API and a terminal client
"""

__version__ = "0.1.0"
