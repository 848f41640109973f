"""Tests for record ids, referral codes and callback/payload parsing."""

import re

import pytest

from app.utils.id_generator import (
    generate_commission_id,
    generate_referral_code,
    generate_withdrawal_id,
)
from bot.utils.callback_parsers import (
    parse_callback_id,
    parse_start_referral_code,
    parse_telegram_id,
    parse_withdrawal_id,
)


class TestIdGenerator:
    def test_commission_id_format(self):
        assert re.match(r"^REF_1001_2002_\d+$", generate_commission_id(1001, 2002))

    def test_withdrawal_id_format(self):
        assert re.match(r"^WD_1001_\d+$", generate_withdrawal_id(1001))

    def test_referral_code_from_name(self):
        code = generate_referral_code("abebe kebede")

        assert re.match(r"^ABE\d{3}$", code)
        assert 100 <= int(code[3:]) <= 999

    @pytest.mark.parametrize("name", [None, "", "Al", "አበበ"])
    def test_referral_code_fallback_prefix(self, name):
        assert re.match(r"^JUT\d{3}$", generate_referral_code(name))


class TestCallbackParsers:
    def test_numeric_id(self):
        assert parse_callback_id("approve_payment_123", "approve_payment_") == 123

    def test_non_numeric_id(self):
        assert parse_callback_id("approve_payment_abc", "approve_payment_") is None

    def test_wrong_prefix(self):
        assert parse_callback_id("reject_123", "approve_payment_") is None

    def test_empty_suffix(self):
        assert parse_callback_id("approve_payment_", "approve_payment_") is None

    def test_withdrawal_id(self):
        data = "approve_withdrawal_WD_1001_1700000000000"

        assert parse_withdrawal_id(data, "approve_withdrawal_") == "WD_1001_1700000000000"

    def test_malformed_withdrawal_id(self):
        assert parse_withdrawal_id("approve_withdrawal_WD_x", "approve_withdrawal_") is None

    @pytest.mark.parametrize("text, expected", [("1001", 1001), (" 1001 ", 1001)])
    def test_telegram_id(self, text, expected):
        assert parse_telegram_id(text) == expected

    @pytest.mark.parametrize("text", [None, "", "abc", "-5", "\u0661\u0660\u0660\u0661"])
    def test_rejected_telegram_id(self, text):
        assert parse_telegram_id(text) is None

    def test_non_ascii_callback_id(self):
        assert parse_callback_id("block_user_\u0661\u0662", "block_user_") is None


class TestStartReferralCode:
    @pytest.mark.parametrize(
        "arg, expected",
        [
            ("ref_ABE123", "ABE123"),
            ("ref-abe123", "ABE123"),
            ("abe123", "ABE123"),
            ("REF123", "REF123"),
        ],
    )
    def test_accepted_forms(self, arg, expected):
        assert parse_start_referral_code(arg) == expected

    @pytest.mark.parametrize("arg", [None, "", "ref_", "ab", "ABE 123", "ABE_123"])
    def test_rejected_forms(self, arg):
        assert parse_start_referral_code(arg) is None
