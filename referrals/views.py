from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdmin, IsNotBanned
from core.mixins import ServiceErrorMixin
from core.services import ServiceError

from .models import ReferralCommission
from .serializers import (
    ReferralSerializer, ReferralSettingsSerializer, ReferralCommissionSerializer,
    ReferralSummarySerializer, CommissionRejectSerializer, BulkApproveSerializer,
    ReferralSettingsUpdateSerializer
)
from .services import ReferralService


class ReferralViewSet(viewsets.ReadOnlyModelViewSet):
    """Users referred by the current user"""
    serializer_class = ReferralSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]

    def get_queryset(self):
        return ReferralService(user=self.request.user).get_my_referrals()

    @action(detail=False, methods=['get'])
    def summary(self, request):
        data = ReferralService(user=request.user).summary()
        return Response(ReferralSummarySerializer(data).data)


class ReferralSettingsView(ServiceErrorMixin, APIView):
    """Commission rates of the caller's group"""

    def get_permissions(self):
        if self.request.method in permissions.SAFE_METHODS:
            return [permissions.IsAuthenticated(), IsNotBanned()]
        return [IsAdmin()]

    def get(self, request):
        try:
            current = ReferralService(user=request.user).get_settings()
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(ReferralSettingsSerializer(current).data)

    def put(self, request):
        serializer = ReferralSettingsUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            updated = ReferralService(user=request.user).update_settings(**serializer.validated_data)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(ReferralSettingsSerializer(updated).data)

    patch = put


class ReferralCommissionViewSet(ServiceErrorMixin, viewsets.ReadOnlyModelViewSet):
    """
    Referral commissions.

    Investors see commissions they earned, admins see every commission of
    their group and approve or reject pending ones.
    """
    serializer_class = ReferralCommissionSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]
    filterset_fields = ['status', 'transaction_type']
    ordering_fields = ['created_at', 'amount']

    def get_queryset(self):
        return ReferralCommission.objects.for_user(self.request.user).select_related('referrer', 'referred')

    @action(detail=False, methods=['get'])
    def mine(self, request):
        queryset = self.filter_queryset(ReferralService(user=request.user).my_commissions())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @action(detail=False, methods=['get'], permission_classes=[IsAdmin])
    def pending(self, request):
        queryset = self.filter_queryset(self.get_queryset().pending())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def approve(self, request, pk=None):
        try:
            commission = ReferralService(user=request.user).approve_commission(pk)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(commission).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def reject(self, request, pk=None):
        serializer = CommissionRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            commission = ReferralService(user=request.user).reject_commission(
                pk, serializer.validated_data['reason']
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(commission).data)

    @action(detail=False, methods=['post'], permission_classes=[IsAdmin])
    def bulk_approve(self, request):
        serializer = BulkApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            result = ReferralService(user=request.user).bulk_approve(serializer.validated_data['commission_ids'])
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(result, status=status.HTTP_200_OK)
