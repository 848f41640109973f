"""Inline keyboard callback data prefixes."""


class CallbackPrefixes:
    """Callback data prefixes; the record id follows the prefix."""

    WITHDRAW_METHOD = "withdraw_method_"
    WITHDRAW_CANCEL = "withdraw_cancel"
    WITHDRAW_START = "withdraw_earnings"

    APPROVE_WITHDRAWAL = "approve_withdrawal_"
    REJECT_WITHDRAWAL = "reject_withdrawal_"
    APPROVE_PAYMENT = "approve_payment_"
    REJECT_PAYMENT = "reject_payment_"

    BLOCK_USER = "block_user_"
