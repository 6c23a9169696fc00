"""Tiered pricing for custom itineraries.

Amounts are whole pesos. ``price`` and ``multi_day_price`` are the only
pricing paths; the breakdown helpers decompose their results for display and
always take the total from them.
"""

from __future__ import annotations

import math

BASE_RATE = 2000
BASE_HOURS = 3
HOURLY_RATE = 500
FULL_PACKAGE_RATE = 4000
# Discounted flat rate for two full days, below 2 x FULL_PACKAGE_RATE.
TWO_DAY_FULL_PACKAGE_RATE = 7000


def billable_hours(total_minutes: float) -> int:
    """Hours are always rounded up: 181 minutes bill as 4 hours."""

    return math.ceil(total_minutes / 60)


def price(total_minutes: float, is_full_package: bool) -> int:
    if is_full_package:
        return FULL_PACKAGE_RATE

    hours = billable_hours(total_minutes)
    if hours <= BASE_HOURS:
        return BASE_RATE
    return BASE_RATE + (hours - BASE_HOURS) * HOURLY_RATE


def is_full_package_better(total_minutes: float) -> bool:
    """True when the flat package is strictly cheaper than hourly billing.

    Only used to suggest the package; billing never switches on its own.
    """

    return FULL_PACKAGE_RATE < price(total_minutes, False)


def multi_day_price(day1_minutes: float, day2_minutes: float = 0, is_full_package: bool = False) -> int:
    is_two_day = day2_minutes > 0
    if is_two_day and is_full_package:
        return TWO_DAY_FULL_PACKAGE_RATE

    # Day 2 is always billed hourly; only the two-day flat rate discounts it.
    day2_price = price(day2_minutes, False) if is_two_day else 0
    return price(day1_minutes, is_full_package) + day2_price


def pricing_breakdown(total_minutes: float, is_full_package: bool, landmark_count: int) -> dict:
    hours = billable_hours(total_minutes)

    if is_full_package:
        total = price(total_minutes, True)
        return {
            "type": "full-package",
            "base_rate": 0,
            "base_hours": 0,
            "additional_hours": 0,
            "additional_cost": 0,
            "total_price": total,
            "savings": price(total_minutes, False) - total,
            "description": f"Full package ({landmark_count} landmarks, {hours}h)",
        }

    additional_hours = max(0, hours - BASE_HOURS)
    description = (
        f"Base rate (up to {BASE_HOURS}h)"
        if hours <= BASE_HOURS
        else f"Base {BASE_HOURS}h + {additional_hours}h additional"
    )
    return {
        "type": "hourly",
        "base_rate": BASE_RATE,
        "base_hours": BASE_HOURS,
        "additional_hours": additional_hours,
        "additional_cost": additional_hours * HOURLY_RATE,
        "total_price": price(total_minutes, False),
        "savings": 0,
        "description": description,
    }


def multi_day_breakdown(
    day1_minutes: float,
    day2_minutes: float = 0,
    is_full_package: bool = False,
    day1_landmark_count: int = 0,
    day2_landmark_count: int = 0,
) -> dict:
    is_two_day = day2_minutes > 0
    if not is_two_day:
        return pricing_breakdown(day1_minutes, is_full_package, day1_landmark_count)

    day1_hours = billable_hours(day1_minutes)
    day2_hours = billable_hours(day2_minutes)
    total_hours = day1_hours + day2_hours

    if is_full_package:
        total = multi_day_price(day1_minutes, day2_minutes, True)
        return {
            "type": "full-package-2day",
            "day1_hours": day1_hours,
            "day2_hours": day2_hours,
            "total_hours": total_hours,
            "total_price": total,
            "savings": multi_day_price(day1_minutes, day2_minutes, False) - total,
            "description": (
                f"2-Day Full Package ({day1_landmark_count + day2_landmark_count} landmarks, "
                f"{total_hours}h total)"
            ),
        }

    return {
        "type": "2day-hourly",
        "day1": pricing_breakdown(day1_minutes, False, day1_landmark_count),
        "day2": pricing_breakdown(day2_minutes, False, day2_landmark_count),
        "day1_hours": day1_hours,
        "day2_hours": day2_hours,
        "total_hours": total_hours,
        "total_price": multi_day_price(day1_minutes, day2_minutes, False),
        "savings": 0,
        "description": f"Day 1: {day1_hours}h + Day 2: {day2_hours}h",
    }


def pricing_constants() -> dict:
    return {
        "base_rate": BASE_RATE,
        "base_hours": BASE_HOURS,
        "hourly_rate": HOURLY_RATE,
        "full_package_rate": FULL_PACKAGE_RATE,
        "two_day_full_package_rate": TWO_DAY_FULL_PACKAGE_RATE,
    }
