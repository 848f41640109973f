"""
Admin Panel Handler.

Entry point of the admin menu.
"""

from typing import Any

from aiogram import Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from bot.keyboards import admin_menu_reply_keyboard
from bot.messages.admin_messages import ADMIN_PANEL


router = Router(name="admin_panel")


@router.message(Command("admin"))
async def handle_admin_panel(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """Show the admin menu."""
    await state.clear()
    await message.answer(
        ADMIN_PANEL,
        reply_markup=admin_menu_reply_keyboard(),
        parse_mode="Markdown",
    )
