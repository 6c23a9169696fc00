"""Integration tests for the itinerary quote endpoint."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.catalog.models import Landmark


class ItineraryQuoteAPITests(APITestCase):
    def setUp(self) -> None:
        self.url = reverse("itinerary-quote")
        self.basilica = Landmark.objects.create(
            name="Basilica del Santo Niño", lat=10.2945, lng=123.9021, estimated_duration=60
        )
        self.fort = Landmark.objects.create(
            name="Fort San Pedro", lat=10.2925, lng=123.9058, estimated_duration=90
        )
        self.temple = Landmark.objects.create(
            name="Temple of Leah", lat=10.3684, lng=123.8720, estimated_duration=360, tour_type="mountain"
        )

    def test_single_day_quote(self) -> None:
        payload = {"days": [{"landmark_ids": [str(self.basilica.id), str(self.fort.id)]}]}

        response = self.client.post(self.url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["total_price"], 2000)
        self.assertEqual(response.data["breakdown"]["type"], "hourly")
        self.assertEqual(response.data["days"][0]["total_time"], 170)
        self.assertEqual(response.data["days"][0]["duration"], "2h 50m")
        self.assertGreater(response.data["days"][0]["distance_km"], 0)
        self.assertFalse(response.data["days"][0]["full_package_suggested"])
        self.assertEqual(response.data["pricing"]["full_package_rate"], 4000)

    def test_client_totals_are_ignored(self) -> None:
        payload = {
            "days": [{"landmark_ids": [str(self.basilica.id)]}],
            "total_price": 1,
            "total_time": 1,
        }

        response = self.client.post(self.url, payload, format="json")

        self.assertEqual(response.data["total_price"], 2000)
        self.assertEqual(response.data["itinerary"]["total_time"], 60)

    def test_two_day_quote(self) -> None:
        payload = {
            "days": [
                {"tour_type": "cebu-city", "landmark_ids": [str(self.basilica.id), str(self.fort.id)]},
                {"tour_type": "mountain", "landmark_ids": [str(self.temple.id), str(self.basilica.id)]},
            ],
            "is_full_package": True,
        }

        response = self.client.post(self.url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["total_price"], 7000)
        self.assertEqual(response.data["breakdown"]["type"], "full-package-2day")
        self.assertEqual(response.data["itinerary"]["duration"], "2-days")
        self.assertEqual([day["total_time"] for day in response.data["days"]], [170, 440])
        self.assertTrue(response.data["days"][1]["full_package_suggested"])

    def test_more_than_two_days_is_rejected(self) -> None:
        day = {"landmark_ids": [str(self.basilica.id)]}

        response = self.client.post(self.url, {"days": [day, day, day]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inactive_landmark_is_rejected(self) -> None:
        self.fort.is_active = False
        self.fort.save()

        response = self.client.post(
            self.url,
            {"days": [{"landmark_ids": [str(self.basilica.id), str(self.fort.id)]}]},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn(str(self.fort.id), str(response.data["days"][0]))
