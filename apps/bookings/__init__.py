"""Bookings app package.

This app encapsulates the booking domain: the booking model, the
overlap-based availability aggregator that keeps resources from being
overbooked, the paginated query engine operators browse bookings with and
the creation and status use cases. Creation runs inside a database
transaction holding a row lock on the booked resource.
"""
