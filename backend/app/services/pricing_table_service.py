"""Session pricing table keyed by session type and duration.

A provider can publish a table such as ``{"individual_60": 100,
"couple_90": 200}``; keys are ``<session type>_<minutes>``.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

PricingTable = dict[str, float]

_KEY_PATTERN = re.compile(r"^(individual|couple|group)_(\d+)$")


class SessionType(str, enum.Enum):
    """Session categories used as pricing table key prefixes."""

    INDIVIDUAL = "individual"
    COUPLE = "couple"
    GROUP = "group"


_PARTY_SIZES = {
    SessionType.INDIVIDUAL: 1,
    SessionType.COUPLE: 2,
    SessionType.GROUP: 3,
}

_LABELS = {
    SessionType.INDIVIDUAL: "1 Person",
    SessionType.COUPLE: "Couple (2 people)",
    SessionType.GROUP: "Group (3+ people)",
}

# Multipliers of the base hourly rate for 30/60/90 minute sessions.
_DEFAULT_MULTIPLIERS: dict[SessionType, dict[int, Decimal]] = {
    SessionType.INDIVIDUAL: {30: Decimal("0.5"), 60: Decimal("1"), 90: Decimal("1.4")},
    SessionType.COUPLE: {30: Decimal("0.75"), 60: Decimal("1.5"), 90: Decimal("2.0")},
    SessionType.GROUP: {30: Decimal("1.0"), 60: Decimal("2.0"), 90: Decimal("2.7")},
}


@dataclass(slots=True, frozen=True)
class PricingKey:
    """Decoded pricing table key."""

    session_type: SessionType
    duration: int
    party_size: int


@dataclass(slots=True, frozen=True)
class PricingOption:
    """One priced entry of a pricing table."""

    session_type: SessionType
    duration: int
    price: float
    label: str


@dataclass(slots=True, frozen=True)
class PriceMatch:
    """Result of looking up the best price for a session."""

    price: float | None
    exact_match: bool


def parse_pricing_key(key: str) -> PricingKey | None:
    match = _KEY_PATTERN.match(key)
    if match is None:
        return None
    session_type = SessionType(match.group(1))
    return PricingKey(
        session_type=session_type,
        duration=int(match.group(2)),
        party_size=_PARTY_SIZES[session_type],
    )


def create_pricing_key(session_type: SessionType, duration: int) -> str:
    return f"{SessionType(session_type).value}_{duration}"


def get_pricing_label(key: str) -> str:
    """Human-readable label, e.g. ``"Couple (2 people) - 90 min"``."""
    parsed = parse_pricing_key(key)
    if parsed is None:
        return key
    return f"{_LABELS[parsed.session_type]} - {parsed.duration} min"


def validate_pricing_table(table: Any) -> tuple[bool, list[str]]:
    """Return ``(valid, errors)`` for a pricing table; an empty table is valid."""
    if not isinstance(table, Mapping):
        return False, ["Pricing table must be an object"]
    errors: list[str] = []
    for key, value in table.items():
        if parse_pricing_key(str(key)) is None:
            errors.append(
                f'Invalid pricing key format: {key}. Use format like "individual_60"'
            )
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            errors.append(f"Price for {key} must be a positive number, got {value}")
    return not errors, errors


def get_price_from_table(
    table: Mapping[str, float] | None, session_type: SessionType, duration: int
) -> float | None:
    if not table:
        return None
    return table.get(create_pricing_key(session_type, duration))


def get_pricing_options(table: Mapping[str, float] | None) -> list[PricingOption]:
    if not table:
        return []
    options: list[PricingOption] = []
    for key, price in table.items():
        parsed = parse_pricing_key(key)
        if parsed is None:
            continue
        options.append(
            PricingOption(
                session_type=parsed.session_type,
                duration=parsed.duration,
                price=price,
                label=get_pricing_label(key),
            )
        )
    return options


def calculate_duration(start_time: str, end_time: str) -> int:
    """Minutes between two ``HH:MM`` times on the same day."""
    start_hour, start_minute = (int(part) for part in start_time.split(":"))
    end_hour, end_minute = (int(part) for part in end_time.split(":"))
    return (end_hour * 60 + end_minute) - (start_hour * 60 + start_minute)


def session_type_for_party_size(party_size: int) -> SessionType:
    if party_size == 1:
        return SessionType.INDIVIDUAL
    if party_size == 2:
        return SessionType.COUPLE
    return SessionType.GROUP


def create_default_pricing_table(base_rate: float = 100) -> PricingTable:
    """Build a starter table scaled from an hourly ``base_rate``."""
    base = Decimal(str(base_rate))
    table: PricingTable = {}
    for session_type, multipliers in _DEFAULT_MULTIPLIERS.items():
        for duration, multiplier in multipliers.items():
            amount = (base * multiplier).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            table[create_pricing_key(session_type, duration)] = float(amount)
    return table


def find_best_price(
    table: Mapping[str, float] | None, session_type: SessionType, duration: int
) -> PriceMatch:
    """Exact key if present, otherwise the closest duration for the same type."""
    if not table:
        return PriceMatch(price=None, exact_match=False)

    exact = get_price_from_table(table, session_type, duration)
    if exact is not None:
        return PriceMatch(price=exact, exact_match=True)

    candidates = sorted(
        (
            option
            for option in get_pricing_options(table)
            if option.session_type == session_type
        ),
        key=lambda option: abs(option.duration - duration),
    )
    if candidates:
        return PriceMatch(price=candidates[0].price, exact_match=False)
    return PriceMatch(price=None, exact_match=False)
