"""
Middlewares.

Bot middlewares for request processing.
"""

from bot.middlewares.access_middleware import AccessMiddleware
from bot.middlewares.account_middleware import AccountMiddleware
from bot.middlewares.admin_auth_middleware import AdminAuthMiddleware
from bot.middlewares.database import DatabaseMiddleware
from bot.middlewares.error_handler import ErrorHandlerMiddleware
from bot.middlewares.markdown_error_handler import MarkdownErrorHandlerMiddleware


__all__ = [
    "AccessMiddleware",
    "AccountMiddleware",
    "AdminAuthMiddleware",
    "DatabaseMiddleware",
    "ErrorHandlerMiddleware",
    "MarkdownErrorHandlerMiddleware",
]
