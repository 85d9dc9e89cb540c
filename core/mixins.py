"""
View mixins shared by the API apps.
"""
import logging

from rest_framework import status
from rest_framework.response import Response

from core.services import (
    ServiceError, NotFoundServiceError, PermissionServiceError
)

logger = logging.getLogger(__name__)


def service_error_response(error: ServiceError) -> Response:
    """Translate a service layer error into an API error response."""
    if isinstance(error, NotFoundServiceError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, PermissionServiceError):
        status_code = status.HTTP_403_FORBIDDEN
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(error)}, status=status_code)


class ServiceErrorMixin:

    def service_error_response(self, error: ServiceError) -> Response:
        logger.info(f"{self.__class__.__name__} rejected request: {error}")
        return service_error_response(error)
