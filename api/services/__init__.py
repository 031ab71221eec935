"""
API Services Layer.

Database operations behind the API endpoints. Each function receives the
request's AsyncSession and, where the caller matters, its Identity.
"""
