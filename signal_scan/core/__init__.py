"""Core utilities and shared infrastructure.

- config: Poller configuration loading and validation
- constants: Wire markers, endpoint paths, user-facing messages
- exceptions: Custom exception hierarchy
"""
