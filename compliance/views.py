"""
KYC API views.
"""
from rest_framework import viewsets, mixins, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsNotBanned
from core.mixins import ServiceErrorMixin
from core.services import ServiceError

from .models import KYCVerification
from .serializers import KYCVerificationSerializer, KYCRejectSerializer
from .services import KYCService, NOT_SUBMITTED


class KYCVerificationViewSet(ServiceErrorMixin,
                             mixins.CreateModelMixin,
                             viewsets.ReadOnlyModelViewSet):
    """
    KYC submissions.

    Investors submit and follow their own records; admins review the
    submissions of their group.
    """

    serializer_class = KYCVerificationSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]
    filterset_fields = ['status', 'document_type']
    search_fields = ['full_name', 'user__email']

    def get_queryset(self):
        return KYCVerification.objects.for_user(self.request.user).select_related('user', 'reviewed_by')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            verification = KYCService(user=request.user).submit(serializer.validated_data)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(verification).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path='status')
    def my_status(self, request):
        """Latest KYC status of the current user"""
        result = KYCService(user=request.user).status()
        if result == NOT_SUBMITTED:
            return Response({'status': NOT_SUBMITTED, 'verification': None})
        return Response({'status': result.status, 'verification': self.get_serializer(result).data})

    @action(detail=False, methods=['get'], permission_classes=[IsAdmin])
    def pending(self, request):
        queryset = self.filter_queryset(self.get_queryset().pending())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def approve(self, request, pk=None):
        try:
            verification = KYCService(user=request.user).approve(pk)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(verification).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def reject(self, request, pk=None):
        serializer = KYCRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            verification = KYCService(user=request.user).reject(pk, serializer.validated_data['reason'])
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(verification).data)
