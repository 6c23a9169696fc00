"""Catalog app package.

This app holds the rentable resources (vehicles and tours) together with
the landmarks customers pick for custom itineraries. Listings are read-only
over the API; operators maintain them through the admin.
"""
