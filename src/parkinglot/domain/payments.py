# File: src/parkinglot/domain/payments.py
"""
Settlement Methods and Validators

A settlement method is a tagged value: every variant carries its
PaymentMethodType tag. Validators are looked up by tag in an explicit
registry, so adding or replacing a validator never touches Facility code.

Validators here stand in for a real payment gateway.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Any, Optional
from enum import Enum
import logging
import threading

from .models import Money
from .exceptions import UnsupportedMethodError


class PaymentMethodType(str, Enum):
    CASH = "CASH"
    CARD = "CARD"

    @classmethod
    def parse(cls, value: str) -> 'PaymentMethodType':
        """Parse a method name; CREDIT_CARD is accepted as CARD"""
        normalised = (value or "").strip().upper()
        if normalised == "CREDIT_CARD":
            normalised = "CARD"
        try:
            return cls(normalised)
        except ValueError:
            raise UnsupportedMethodError(value)


# ============================================================================
# SETTLEMENT METHODS
# ============================================================================

@dataclass(frozen=True)
class PaymentMethod:
    """Base settlement method; `method_type` is the only dispatch key"""
    method_type: Any = field(init=False, default=None)

    def to_dict(self) -> Dict[str, Any]:
        return {"method": str(self.method_type)}


@dataclass(frozen=True)
class CashPayment(PaymentMethod):
    """Cash tender"""
    amount: Money = None
    method_type: PaymentMethodType = field(init=False, default=PaymentMethodType.CASH)

    def __post_init__(self):
        if self.amount is None:
            raise ValueError("Cash payment requires a tendered amount")
        object.__setattr__(self, 'amount', Money.of(self.amount))

    def to_dict(self) -> Dict[str, Any]:
        return {"method": self.method_type.value, "amount": self.amount.to_dict()}


@dataclass(frozen=True)
class CardPayment(PaymentMethod):
    """Card credentials; the number is masked in repr"""
    card_number: str = field(default="", repr=False)
    cvv: str = field(default="", repr=False)
    expiry: str = ""
    method_type: PaymentMethodType = field(init=False, default=PaymentMethodType.CARD)

    @property
    def masked_number(self) -> str:
        digits = self.card_number or ""
        return f"****{digits[-4:]}" if len(digits) >= 4 else "****"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method_type.value,
            "card": self.masked_number,
            "expiry": self.expiry,
        }

    def __repr__(self) -> str:
        return f"CardPayment(card={self.masked_number}, expiry={self.expiry})"


# ============================================================================
# VALIDATORS
# ============================================================================

SettlementValidator = Callable[[PaymentMethod, Money], bool]


def validate_cash(method: CashPayment, fee: Money) -> bool:
    """
    Approve when the tendered amount covers the fee
    Cash is taken in the facility currency, so only the amounts are compared
    """
    return method.amount.amount >= fee.amount


def validate_card(method: CardPayment, fee: Money) -> bool:
    """Approve well-formed card credentials (gateway stand-in)"""
    return len(method.card_number or "") >= 16 and len(method.cvv or "") == 3


class SettlementValidatorRegistry:
    """
    Maps a PaymentMethodType tag to its validator

    Selection is a pure lookup on the tag; a tag with no registered
    validator raises UnsupportedMethodError.
    """

    def __init__(self, validators: Optional[Dict[Any, SettlementValidator]] = None):
        self._lock = threading.Lock()
        self._validators: Dict[Any, SettlementValidator] = dict(validators or {})
        self._logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def default(cls) -> 'SettlementValidatorRegistry':
        return cls({
            PaymentMethodType.CASH: validate_cash,
            PaymentMethodType.CARD: validate_card,
        })

    def register(self, method_type: Any, validator: SettlementValidator) -> None:
        """Register or replace the validator for a tag"""
        with self._lock:
            self._validators[method_type] = validator
        self._logger.info(f"Registered validator for {method_type}")

    def unregister(self, method_type: Any) -> None:
        with self._lock:
            self._validators.pop(method_type, None)

    def select(self, method: PaymentMethod) -> SettlementValidator:
        with self._lock:
            validator = self._validators.get(getattr(method, 'method_type', None))
        if validator is None:
            raise UnsupportedMethodError(getattr(method, 'method_type', type(method).__name__))
        return validator

    def supports(self, method_type: Any) -> bool:
        with self._lock:
            return method_type in self._validators
