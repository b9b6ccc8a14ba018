# expense_tracker/errors.py


class ExpenseTrackerError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ExpenseTrackerError):
    status_code = 400


class NotFoundError(ExpenseTrackerError):
    status_code = 404


class StoreError(ExpenseTrackerError):
    """The database could not be reached or a query failed."""

    status_code = 503
