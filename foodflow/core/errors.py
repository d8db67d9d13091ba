# foodflow/core/errors.py
"""
Error kinds raised by the services and storage adapters.

Each error knows the HTTP status it maps to; ``foodflow.main`` renders
them as ``{"success": false, "error": <message>}``. Nothing is retried.
"""


class FoodFlowError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(FoodFlowError):
    status_code = 404


class Conflict(FoodFlowError):
    status_code = 409


class InvalidReference(FoodFlowError):
    status_code = 400


class ValidationError(FoodFlowError):
    status_code = 400


class Unauthenticated(FoodFlowError):
    status_code = 401


class InternalError(FoodFlowError):
    status_code = 500
