"""Itineraries app package.

Pure route time estimation and tiered pricing for custom multi-stop tours,
plus the JSON itinerary documents stored on tour bookings.
"""
