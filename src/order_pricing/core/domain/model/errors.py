from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PricingError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(PricingError):
    pass


@dataclass(frozen=True)
class UnknownDiscount(ValidationError):
    name: str

    def __str__(self) -> str:  # pragma: no cover
        return f"unknown_discount: {self.name} ({self.message})"


@dataclass(frozen=True)
class UnknownDiscountKind(ValidationError):
    kind: str

    def __str__(self) -> str:  # pragma: no cover
        return f"unknown_discount_kind: {self.kind} ({self.message})"
