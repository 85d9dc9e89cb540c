"""
Base service class for business logic operations.

Provides common functionality for all service classes including
error handling, logging, and permission checks.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, List, Type, TypeVar

from django.core.exceptions import ValidationError

T = TypeVar('T')


class ServiceError(Exception):
    """Base exception for service errors."""
    pass


class ValidationServiceError(ServiceError):
    """Service error for validation failures."""
    pass


class PermissionServiceError(ServiceError):
    """Service error for permission failures."""
    pass


class NotFoundServiceError(ServiceError):
    """Service error for not found resources."""
    pass


class BaseService:
    """
    Base service class providing common functionality.

    All business logic services inherit from this class to get
    consistent error handling, logging and permission checks.
    """

    def __init__(self, user: Optional['User'] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize service with user context.

        Args:
            user: The user performing the operation
            context: Additional context for the operation (e.g. group, request)
        """
        self.user = user
        self.context = context or {}
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

        self.group = self.context.get('group') or getattr(user, 'group', None)
        self.request = self.context.get('request')

    def _log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None, level: str = 'info'):
        """
        Log service operation.

        Args:
            operation: Name of the operation
            details: Additional details to log
            level: Logging level (debug, info, warning, error)
        """
        user_info = f"user={self.user.email if self.user else 'system'}"
        context_str = f"group={getattr(self.group, 'name', self.group)}" if self.group else "no context"
        details_str = f" details={details}" if details else ""

        message = f"{operation} - {user_info}, {context_str}{details_str}"

        log_method = getattr(self.logger, level, self.logger.info)
        log_method(message)

    def _check_permission(self, permission: str, obj: Optional[Any] = None) -> bool:
        """
        Check if user has permission for operation.

        Subclasses override this for object-level rules.

        Raises:
            PermissionServiceError: If user lacks permission
        """
        if not self.user:
            raise PermissionServiceError("Authentication required")
        return True

    def _require_admin(self) -> None:
        """Raise unless the acting user is a platform admin."""
        self._check_permission('admin')
        if not self.user.is_platform_admin:
            raise PermissionServiceError("Admin access required")

    def _check_owner(self, obj: Any, owner_field: str = 'user') -> None:
        """Raise unless the acting user owns ``obj`` or administers its group."""
        self._check_permission('owner', obj)
        if self.user.is_superuser:
            return
        if self.user.is_platform_admin and getattr(obj, 'group_id', None) == self.user.group_id:
            return
        if getattr(obj, f'{owner_field}_id', None) != self.user.id:
            raise PermissionServiceError("Unauthorized")

    def validate_required_fields(self, data: Dict[str, Any], required_fields: List[str]) -> None:
        """
        Validate that required fields are present in data.

        Raises:
            ValidationServiceError: If required fields are missing
        """
        missing_fields = [field for field in required_fields if not data.get(field)]

        if missing_fields:
            raise ValidationServiceError(
                f"Missing required fields: {', '.join(missing_fields)}"
            )

    def validate_amount(self, amount: Any, field: str = 'amount') -> Decimal:
        """
        Coerce ``amount`` to a positive Decimal.

        Raises:
            ValidationServiceError: If the amount is not a positive number
        """
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationServiceError(f"Invalid {field}")

        if not value.is_finite() or value <= 0:
            raise ValidationServiceError(f"{field.capitalize()} must be greater than zero")
        return value

    def get_or_404(self, model_class: Type[T], queryset=None, **kwargs) -> T:
        """
        Get object or raise NotFoundServiceError.

        Args:
            model_class: Model class to query
            queryset: Optional pre-filtered queryset to look in
            **kwargs: Query parameters

        Raises:
            NotFoundServiceError: If object not found
        """
        source = queryset if queryset is not None else model_class.objects.all()
        try:
            return source.get(**kwargs)
        except (model_class.DoesNotExist, ValidationError, ValueError):
            raise NotFoundServiceError(f"{model_class._meta.verbose_name.capitalize()} not found")
        except model_class.MultipleObjectsReturned:
            raise ValidationServiceError(f"Multiple {model_class.__name__} objects found")
