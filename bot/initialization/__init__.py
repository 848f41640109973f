"""
Bot Initialization Module.

This module contains all initialization logic split into focused modules:
- logging: Logger configuration
- services: Environment checks and notification wiring
- storage: FSM storage setup (Redis with in-memory fallback)
- middlewares: Middleware registration
- handlers: Handler registration (user and admin)
- shutdown: Graceful shutdown handler
"""

__all__ = []
