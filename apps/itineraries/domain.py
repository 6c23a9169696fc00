"""
Itinerary Documents

A priced itinerary is stored on a tour booking as a JSON document. This
module builds those documents from catalog landmarks (recomputing time and
price, never trusting client totals), parses them back and renders the short
texts shown on booking lists.

Stop order is carried by the explicit ``order`` field; list position is not
trusted when reading a document back.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Sequence

from . import geo, pricing

logger = logging.getLogger(__name__)

ONE_DAY = "1-day"
TWO_DAYS = "2-days"
DEFAULT_SUMMARY = "Custom DIY Tour"


@dataclass(frozen=True)
class ItineraryStop:
    id: str
    name: str
    duration: int
    order: int
    image: str = ""


@dataclass
class DayPlan:
    day: int
    landmarks: list[ItineraryStop]
    total_time: int
    tour_type: str = ""

    def ordered(self) -> list[ItineraryStop]:
        return sorted(self.landmarks, key=lambda stop: stop.order)


@dataclass
class Itinerary:
    """Single-day itinerary."""

    landmarks: list[ItineraryStop]
    total_time: int
    total_price: int
    is_full_package: bool = False

    def ordered(self) -> list[ItineraryStop]:
        return sorted(self.landmarks, key=lambda stop: stop.order)

    def to_document(self) -> dict:
        return asdict(self)


@dataclass
class MultiDayItinerary:
    duration: str
    days: list[DayPlan] = field(default_factory=list)
    total_price: int = 0
    is_full_package: bool = False

    def day(self, number: int) -> DayPlan | None:
        return next((plan for plan in self.days if plan.day == number), None)

    def ordered(self) -> list[ItineraryStop]:
        return [stop for plan in sorted(self.days, key=lambda p: p.day) for stop in plan.ordered()]

    def to_document(self) -> dict:
        return asdict(self)


def _stops(landmarks: Sequence) -> list[ItineraryStop]:
    return [
        ItineraryStop(
            id=str(landmark.id),
            name=landmark.name,
            duration=landmark.estimated_duration,
            order=index,
            image=getattr(landmark, "image_url", "") or "",
        )
        for index, landmark in enumerate(landmarks, start=1)
    ]


def build_itinerary(landmarks: Sequence, is_full_package: bool = False) -> Itinerary:
    """Price a single-day route from catalog landmarks in visiting order."""

    minutes = geo.total_time(landmarks)
    return Itinerary(
        landmarks=_stops(landmarks),
        total_time=minutes,
        total_price=pricing.price(minutes, is_full_package),
        is_full_package=is_full_package,
    )


def build_multi_day_itinerary(
    days: Sequence[tuple[str, Sequence]],
    is_full_package: bool = False,
) -> MultiDayItinerary:
    """Price a one or two day route.

    ``days`` holds ``(tour_type, landmarks)`` pairs, day 1 first.
    """

    if not 1 <= len(days) <= 2:
        raise ValueError("An itinerary covers one or two days")

    plans = []
    for number, (tour_type, landmarks) in enumerate(days, start=1):
        plans.append(
            DayPlan(
                day=number,
                tour_type=tour_type,
                landmarks=_stops(landmarks),
                total_time=geo.total_time(landmarks),
            )
        )

    day1_minutes = plans[0].total_time
    day2_minutes = plans[1].total_time if len(plans) > 1 else 0
    return MultiDayItinerary(
        duration=TWO_DAYS if len(plans) == 2 else ONE_DAY,
        days=plans,
        total_price=pricing.multi_day_price(day1_minutes, day2_minutes, is_full_package),
        is_full_package=is_full_package,
    )


def _stop_from_document(data: dict) -> ItineraryStop:
    return ItineraryStop(
        id=str(data.get("id", "")),
        name=data.get("name", ""),
        duration=int(data.get("duration", 0)),
        order=int(data.get("order", 0)),
        image=data.get("image", "") or "",
    )


def parse_itinerary_details(raw) -> Itinerary | MultiDayItinerary | None:
    """Rebuild an itinerary from its stored form (dict or JSON text).

    Unreadable documents are logged and treated as absent.
    """

    if not raw:
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Unreadable itinerary details: %.80s", raw)
            return None
    if not isinstance(raw, dict):
        return None

    try:
        if "days" in raw:
            return MultiDayItinerary(
                duration=raw.get("duration", ONE_DAY),
                days=[
                    DayPlan(
                        day=int(day.get("day", index)),
                        tour_type=day.get("tour_type", ""),
                        landmarks=[_stop_from_document(stop) for stop in day.get("landmarks", [])],
                        total_time=int(day.get("total_time", 0)),
                    )
                    for index, day in enumerate(raw.get("days", []), start=1)
                ],
                total_price=int(raw.get("total_price", 0)),
                is_full_package=bool(raw.get("is_full_package", False)),
            )
        return Itinerary(
            landmarks=[_stop_from_document(stop) for stop in raw.get("landmarks", [])],
            total_time=int(raw.get("total_time", 0)),
            total_price=int(raw.get("total_price", 0)),
            is_full_package=bool(raw.get("is_full_package", False)),
        )
    except (AttributeError, TypeError, ValueError):
        logger.warning("Malformed itinerary details document", exc_info=True)
        return None


# ===== Display helpers =====

def itinerary_summary(details: Itinerary | MultiDayItinerary | None) -> str:
    if details is None:
        return DEFAULT_SUMMARY

    if isinstance(details, MultiDayItinerary):
        count = sum(len(plan.landmarks) for plan in details.days)
        hours = pricing.billable_hours(sum(plan.total_time for plan in details.days))
        label = "2-Day" if details.duration == TWO_DAYS else "1-Day"
        return f"{label} • {count} landmark{'' if count == 1 else 's'} • {hours}h total"

    count = len(details.landmarks)
    hours = pricing.billable_hours(details.total_time)
    return f"{count} landmark{'s' if count > 1 else ''} • {hours}h tour"


def landmark_names(details: Itinerary | MultiDayItinerary | None, max_display: int = 3) -> str:
    if details is None:
        return DEFAULT_SUMMARY

    names = [stop.name for stop in details.ordered()]
    if len(names) <= max_display:
        return ", ".join(names)
    return f"{', '.join(names[:max_display])} and {len(names) - max_display} more"


def pricing_breakdown_text(details: Itinerary | MultiDayItinerary | None) -> str:
    if details is None:
        return ""

    if isinstance(details, MultiDayItinerary):
        if details.duration == TWO_DAYS and details.is_full_package:
            return "2-Day Full Package"
        day1 = details.day(1)
        day2 = details.day(2)
        hours_day1 = pricing.billable_hours(day1.total_time if day1 else 0)
        if details.duration == TWO_DAYS and day2 is not None:
            return f"Day 1: {hours_day1}h • Day 2: {pricing.billable_hours(day2.total_time)}h"
        return f"Day 1: {hours_day1}h"

    if details.is_full_package:
        return "Full Package Deal"
    hours = pricing.billable_hours(details.total_time)
    if hours <= pricing.BASE_HOURS:
        return f"Base Rate ({pricing.BASE_HOURS}h)"
    return f"Base {pricing.BASE_HOURS}h + {hours - pricing.BASE_HOURS}h additional"


def first_landmark_image(details: Itinerary | MultiDayItinerary | None) -> str | None:
    if details is None:
        return None
    if isinstance(details, MultiDayItinerary):
        plan = details.day(1) or (details.days[0] if details.days else None)
        stops = plan.ordered() if plan else []
    else:
        stops = details.ordered()
    return stops[0].image if stops else None


def has_valid_itinerary(details: Itinerary | MultiDayItinerary | None) -> bool:
    if details is None:
        return False
    if isinstance(details, MultiDayItinerary):
        return any(plan.landmarks for plan in details.days)
    return bool(details.landmarks)
