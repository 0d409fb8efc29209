"""
Custom exceptions for the Horizon missions backend.
Provides specific exception types so routes can map them to HTTP statuses.
"""
from typing import List, Optional


class HorizonException(Exception):
    """Base exception for the application"""
    pass


class MissionNotFoundException(HorizonException):
    """Raised when a mission is not found (or belongs to another user)"""
    def __init__(self, mission_id: int):
        self.mission_id = mission_id
        super().__init__("Mission not found")


class InstanceNotFoundException(HorizonException):
    """Raised when a mission instance is not found (or belongs to another user)"""
    def __init__(self, instance_id: int):
        self.instance_id = instance_id
        super().__init__("Mission instance not found")


class InvalidStateTransitionException(HorizonException):
    """Raised when an instance is not in the status an operation requires"""
    def __init__(self, instance_id: int, current: str, message: str):
        self.instance_id = instance_id
        self.current = current
        super().__init__(message)


class PlanLimitException(HorizonException):
    """Raised when the user's subscription plan does not allow an action"""
    def __init__(self, plan: str, limit_name: str, limit: int):
        self.plan = plan
        self.limit_name = limit_name
        self.limit = limit
        super().__init__(
            f"The {plan} plan allows at most {limit} {limit_name.replace('_', ' ')}"
        )


class AdminRequiredException(HorizonException):
    """Raised when an admin-only action is requested by a regular user"""
    def __init__(self):
        super().__init__("Unauthorized: Admin access required")


class EnvironmentRestrictedException(HorizonException):
    """Raised when an action is disabled in the current environment"""
    def __init__(self, environment: str):
        self.environment = environment
        super().__init__(f"This endpoint is disabled in {environment}")


class ValidationException(HorizonException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Validation error for {field}: {message}")


class UnsafeContentException(ValidationException):
    """Raised when user text trips the safety patterns"""
    def __init__(
        self,
        field: str,
        message: str,
        severity: str,
        action: str,
        resources: Optional[List[dict]] = None
    ):
        self.severity = severity
        self.action = action
        self.resources = resources or []
        super().__init__(field, message)
