#!/usr/bin/env python3
"""
Unit Tests for Settlement Methods and the Validator Registry
"""

import unittest
from dataclasses import dataclass, field
from decimal import Decimal

from parkinglot.domain.exceptions import UnsupportedMethodError
from parkinglot.domain.models import Money
from parkinglot.domain.payments import (
    PaymentMethod, PaymentMethodType, CashPayment, CardPayment,
    SettlementValidatorRegistry, validate_cash, validate_card
)


@dataclass(frozen=True)
class VoucherPayment(PaymentMethod):
    code: str = ""
    method_type: str = field(init=False, default="VOUCHER")


class TestPaymentMethodType(unittest.TestCase):

    def test_parse(self):
        self.assertIs(PaymentMethodType.parse("cash"), PaymentMethodType.CASH)
        self.assertIs(PaymentMethodType.parse("CREDIT_CARD"), PaymentMethodType.CARD)
        self.assertIs(PaymentMethodType.parse(" card "), PaymentMethodType.CARD)

    def test_parse_unknown(self):
        with self.assertRaises(UnsupportedMethodError):
            PaymentMethodType.parse("BITCOIN")


class TestMethods(unittest.TestCase):

    def test_cash_amount_becomes_money(self):
        cash = CashPayment(20)
        self.assertEqual(cash.amount, Money.of(20))
        self.assertIs(cash.method_type, PaymentMethodType.CASH)

    def test_cash_requires_amount(self):
        with self.assertRaises(ValueError):
            CashPayment()

    def test_card_is_masked(self):
        card = CardPayment("1234567890123456", "123", "12/25")
        self.assertIs(card.method_type, PaymentMethodType.CARD)
        self.assertEqual(card.masked_number, "****3456")
        self.assertNotIn("1234567890123456", repr(card))
        self.assertNotIn("123", card.to_dict().values())


class TestValidators(unittest.TestCase):

    def test_cash_covers_fee(self):
        fee = Money.of(5)
        self.assertTrue(validate_cash(CashPayment(5), fee))
        self.assertTrue(validate_cash(CashPayment(20), fee))
        self.assertFalse(validate_cash(CashPayment("4.99"), fee))

    def test_cash_compared_in_fee_currency(self):
        fee = Money(Decimal('5.00'), "EUR")
        self.assertTrue(validate_cash(CashPayment(5), fee))
        self.assertTrue(validate_cash(CashPayment(Money(Decimal('6'), "EUR")), fee))
        self.assertFalse(validate_cash(CashPayment(Money(Decimal('4'), "EUR")), fee))

    def test_card_credentials(self):
        fee = Money.of(5)
        self.assertTrue(validate_card(CardPayment("1234567890123456", "123", "12/25"), fee))
        self.assertFalse(validate_card(CardPayment("123456789012345", "123", "12/25"), fee))
        self.assertFalse(validate_card(CardPayment("1234567890123456", "12", "12/25"), fee))


class TestSettlementValidatorRegistry(unittest.TestCase):

    def setUp(self):
        self.registry = SettlementValidatorRegistry.default()

    def test_default_selection(self):
        self.assertIs(self.registry.select(CashPayment(1)), validate_cash)
        self.assertIs(self.registry.select(CardPayment("1" * 16, "123")), validate_card)

    def test_unknown_tag_raises(self):
        with self.assertRaises(UnsupportedMethodError) as ctx:
            self.registry.select(VoucherPayment("FREE"))
        self.assertEqual(ctx.exception.method_type, "VOUCHER")

    def test_register_new_variant(self):
        self.registry.register("VOUCHER", lambda method, fee: method.code == "FREE")
        self.assertTrue(self.registry.supports("VOUCHER"))

        validator = self.registry.select(VoucherPayment("FREE"))
        self.assertTrue(validator(VoucherPayment("FREE"), Money.of(5)))

    def test_unregister(self):
        self.registry.unregister(PaymentMethodType.CARD)
        self.assertFalse(self.registry.supports(PaymentMethodType.CARD))
        with self.assertRaises(UnsupportedMethodError):
            self.registry.select(CardPayment("1" * 16, "123"))


if __name__ == '__main__':
    unittest.main()
