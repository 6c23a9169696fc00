"""Itinerary quoting against the landmark catalog."""

from __future__ import annotations

import logging
from typing import Sequence

from apps.catalog.models import Landmark

from .domain import Itinerary, MultiDayItinerary, build_itinerary, build_multi_day_itinerary

logger = logging.getLogger(__name__)


class UnknownLandmarkError(Exception):
    """Raised when an itinerary names landmarks missing from the catalog."""

    def __init__(self, landmark_ids: Sequence[str]):
        self.landmark_ids = list(landmark_ids)
        super().__init__(f"Unknown or inactive landmarks: {', '.join(self.landmark_ids)}")


def load_landmarks(landmark_ids: Sequence[str]) -> list[Landmark]:
    """Active landmarks in the requested order; duplicates are kept."""

    found = {
        str(landmark.id): landmark
        for landmark in Landmark.objects.filter(id__in=list(set(landmark_ids)), is_active=True)
    }
    missing = [landmark_id for landmark_id in landmark_ids if str(landmark_id) not in found]
    if missing:
        raise UnknownLandmarkError(missing)
    return [found[str(landmark_id)] for landmark_id in landmark_ids]


def quote_itinerary(
    days: Sequence[tuple[str, Sequence[str]]],
    is_full_package: bool = False,
) -> Itinerary | MultiDayItinerary:
    """
    Price an itinerary from landmark ids

    ``days`` holds ``(tour_type, landmark_ids)`` pairs in day order. A single
    day without a tour type is a plain single-day itinerary; otherwise the
    day-by-day document is built. Time and price always come from catalog
    data, never from the client.
    """

    loaded = [(tour_type, load_landmarks(landmark_ids)) for tour_type, landmark_ids in days]
    if len(loaded) == 1 and not loaded[0][0]:
        itinerary = build_itinerary(loaded[0][1], is_full_package)
    else:
        itinerary = build_multi_day_itinerary(loaded, is_full_package)

    logger.debug(f"Quoted itinerary of {len(loaded)} day(s): {itinerary.total_price}")
    return itinerary
