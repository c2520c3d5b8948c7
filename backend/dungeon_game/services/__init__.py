"""Game domain services: maze generation, sessions, roster, leaderboard
and the game loop that ties them together.

Nothing in here knows about Socket.IO; the transport hands messages to
``GameServer`` and provides the broadcaster it emits through.
"""
