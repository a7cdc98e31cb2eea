"""
Domain exceptions for analytics app.

This module defines domain-specific exceptions that are raised by the
analytics layer. They represent invalid queries, separate from HTTP
concerns.

Exception Hierarchy:
    AnalyticsServiceError (base)
    ├── InvalidMonthError
    └── MissingParameterError

Usage:
    from apps.analytics.exceptions import InvalidMonthError

    if not 1 <= month <= 12:
        raise InvalidMonthError(f"Invalid month: {month}. Use 1-12")
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics errors.

    All domain-specific exceptions in the analytics app inherit from this
    class, making it easy to catch all analytics errors in views:

        try:
            data = LedgerAnalytics.calendar_month(transactions, 2024, 13)
        except AnalyticsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidMonthError(AnalyticsServiceError):
    """
    Raised when a calendar month is outside 1-12.

    Example:
        raise InvalidMonthError("Invalid month: 13. Use 1-12")
    """

    pass


class MissingParameterError(AnalyticsServiceError):
    """
    Raised when a required parameter is missing.

    Example:
        raise MissingParameterError("A date is required")
    """

    pass
