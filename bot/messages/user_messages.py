"""
User Message Templates.

Texts shown to students: welcome, referral dashboard, withdrawal form.
All dynamic user input is Markdown-escaped.
"""

from app.models.account import Account
from app.models.withdrawal_request import WithdrawalRequest
from app.services.referral.config import ReferralProgramConfig
from app.services.referral.referral_service import ReferralSummary
from app.utils.exceptions import IneligibilityReason, NotEligible
from app.utils.formatters import escape_md, format_etb


# ============================================================================
# STATIC TEXTS
# ============================================================================

REGISTER_FIRST = "❌ Please complete registration first. Send /start to begin."

ACCOUNT_BLOCKED = (
    "🚫 Your account has been blocked.\n"
    "Please contact the administrators if you think this is a mistake."
)

WITHDRAWAL_CANCELLED = "❌ Withdrawal cancelled. Nothing was submitted."

NO_WITHDRAWAL_IN_PROGRESS = "ℹ️ You have no withdrawal in progress."

TELEBIRR_PHONE_PROMPT = (
    "📱 Please enter your Telebirr phone number (Format: 251912345678):"
)

BANK_ACCOUNT_PROMPT = "🏦 Please enter your CBE account number:"

BANK_NAME_PROMPT = "👤 Please enter the account holder name:"


# ============================================================================
# FORMATTERS
# ============================================================================


def generate_referral_link(bot_username: str | None, referral_code: str) -> str:
    """
    Build the invite link for a referral code.

    Returns:
        Link in format: https://t.me/{bot}?start=ref_{code}
    """
    return f"https://t.me/{bot_username or 'bot'}?start=ref_{referral_code}"


def format_welcome(full_name: str | None, referral_link: str, referred: bool) -> str:
    text = (
        f"👋 Welcome, *{escape_md(full_name) or 'student'}*!\n\n"
        f"Invite friends with your personal link and earn a commission "
        f"for every friend whose registration payment is approved.\n\n"
        f"🔗 Your link:\n{escape_md(referral_link)}"
    )
    if referred:
        text += "\n\n🤝 You joined through a friend's invitation."
    return text


def format_referral_summary(summary: ReferralSummary, referral_link: str) -> str:
    """
    Referral dashboard text.

    Args:
        summary: Referral standing of the account
        referral_link: Invite link of the account

    Returns:
        Markdown text
    """
    return (
        f"👥 *YOUR REFERRAL NETWORK*\n\n"
        f"🎯 Your Referral Code: `{summary.referral_code}`\n\n"
        f"🔗 Your Referral Link:\n{escape_md(referral_link)}\n\n"
        f"💰 *Earnings Summary:*\n"
        f"• Commission per referral: {format_etb(summary.commission_per_referral)}\n"
        f"• Total earned: {format_etb(summary.total_earned)}\n"
        f"• Available balance: {format_etb(summary.balance)}\n\n"
        f"📊 *Referral Stats:*\n"
        f"• ✅ Paid referrals: {summary.paid_referrals}\n"
        f"• ⏳ Pending: {summary.unpaid_referrals}\n"
        f"• 📈 Total invited: {summary.total_referrals}\n\n"
        f"💡 *Withdrawal Eligibility:*\n"
        f"Need {summary.min_paid_referrals} paid referrals to withdraw\n"
        f"Current: {summary.paid_referrals}/{summary.min_paid_referrals}"
    )


def format_balance(summary: ReferralSummary) -> str:
    status = (
        "✅ You can request a withdrawal."
        if summary.eligibility.eligible
        else "⏳ Not yet eligible for withdrawal."
    )
    return (
        f"💰 *BALANCE*\n\n"
        f"Available: *{format_etb(summary.balance)}*\n"
        f"Total earned: {format_etb(summary.total_earned)}\n"
        f"Total withdrawn: {format_etb(summary.total_withdrawn)}\n\n"
        f"{status}"
    )


def format_not_eligible(
    error: NotEligible, account: Account, config: ReferralProgramConfig
) -> str:
    """
    Explain which withdrawal threshold is unmet.

    Args:
        error: Raised eligibility failure
        account: Account that tried to withdraw
        config: Referral program terms
    """
    if error.reason == IneligibilityReason.NOT_ENOUGH_REFERRALS:
        return (
            f"❌ *WITHDRAWAL NOT ELIGIBLE*\n\n"
            f"You need *{config.min_paid_referrals}* paid referrals to withdraw.\n"
            f"You have *{account.paid_referrals}* paid referrals.\n"
            f"Need *{error.missing_referrals}* more paid referrals.\n\n"
            f"Keep inviting friends to earn more!"
        )
    if error.reason == IneligibilityReason.WITHDRAWALS_DISABLED:
        return "⏸ Withdrawals are temporarily disabled. Please try again later."
    return (
        f"❌ *INSUFFICIENT BALANCE*\n\n"
        f"Minimum withdrawal amount: *{format_etb(config.min_withdrawal_amount)}*\n"
        f"Your balance: *{format_etb(account.balance)}*"
    )


def format_withdrawal_start(balance, min_amount) -> str:
    return (
        f"💸 *REQUEST WITHDRAWAL*\n\n"
        f"Available Balance: *{format_etb(balance)}*\n"
        f"Minimum Withdrawal: *{format_etb(min_amount)}*\n\n"
        f"Choose payment method:"
    )


def format_amount_prompt(method_label: str, balance, min_amount) -> str:
    return (
        f"*{method_label} Withdrawal*\n\n"
        f"Available: {format_etb(balance)}\n\n"
        f"Enter amount to withdraw (minimum {format_etb(min_amount)}):\n"
        f"Example: 100"
    )


def format_withdrawal_submitted(request: WithdrawalRequest) -> str:
    return (
        f"✅ *Withdrawal Request Submitted!*\n\n"
        f"Amount: *{format_etb(request.amount)}*\n"
        f"Method: *{escape_md(request.payment_method)}*\n"
        f"Withdrawal ID: `{request.id}`\n\n"
        f"Admins have been notified. You will receive an update soon."
    )
