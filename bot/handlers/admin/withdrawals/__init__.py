"""
Admin Withdrawals Handlers Package.

- pending.py: Pending withdrawals list
- approval.py: Approve, reject and the rejection reason dialog
"""

from aiogram import Router

from bot.handlers.admin.withdrawals import approval, pending
from bot.handlers.admin.withdrawals.pending import handle_pending_withdrawals


router = Router(name="admin_withdrawals")

# Pending list is the main entry point
router.include_router(pending.router)
router.include_router(approval.router)

__all__ = ["router", "handle_pending_withdrawals"]
