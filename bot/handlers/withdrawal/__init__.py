"""
Withdrawal handlers package.

- handlers.py: Entry points, method choice and cancel
- processors.py: Text input for each step of the form
"""

from aiogram import Router

from . import handlers, processors
from .handlers import build_workflow


# Entry points first so the menu button restarts a form in progress
router = Router(name="withdrawal")
router.include_router(handlers.router)
router.include_router(processors.router)

__all__ = [
    "router",
    "build_workflow",
]
