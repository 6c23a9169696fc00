"""Analytics app package.

Operator dashboard statistics, cached in the Django cache and refreshed by
Celery beat or whenever a booking changes.
"""
