"""
Admin Withdrawals - Pending List Handler.

Shows pending withdrawal requests, oldest first, one message per request
with its approve / reject buttons.
"""

from typing import Any

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.constants import PENDING_WITHDRAWALS_PAGE_SIZE
from app.services.account_service import AccountService
from app.services.referral.config import ReferralProgramConfig
from app.services.withdrawal import WithdrawalApprovalService
from bot.keyboards import withdrawal_review_keyboard
from bot.keyboards.buttons import AdminButtons, WithdrawalButtons
from bot.messages.admin_messages import (
    NO_PENDING_WITHDRAWALS,
    format_pending_header,
    format_pending_withdrawal,
)


router = Router(name="admin_withdrawals_pending")


@router.message(Command("withdrawals"))
@router.message(
    F.text.in_(
        {AdminButtons.WITHDRAWAL_REQUESTS, WithdrawalButtons.PENDING_WITHDRAWALS}
    )
)
async def handle_pending_withdrawals(
    message: Message,
    session: AsyncSession,
    **data: Any,
) -> None:
    """List pending withdrawals with review buttons."""
    approval_service = WithdrawalApprovalService(session)
    requests = await approval_service.get_pending_withdrawals(
        limit=PENDING_WITHDRAWALS_PAGE_SIZE
    )
    if not requests:
        await message.answer(NO_PENDING_WITHDRAWALS)
        return

    total = await approval_service.count_pending_withdrawals()
    await message.answer(format_pending_header(total), parse_mode="Markdown")

    config: ReferralProgramConfig = data["referral_config"]
    account_service = AccountService(session)
    for request in requests:
        account = await account_service.get_account(request.user_id)
        await message.answer(
            format_pending_withdrawal(request, account, config.min_paid_referrals),
            reply_markup=withdrawal_review_keyboard(request.id),
            parse_mode="Markdown",
        )
