"""
Shared Kernel

This module contains base classes and utilities shared across all domain contexts.
Bookings, itineraries and analytics build on these value objects, events and
the unit of work.
"""
