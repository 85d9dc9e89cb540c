from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdmin, IsNotBanned
from core.mixins import ServiceErrorMixin
from core.services import ServiceError

from .models import Wallet, WalletTransaction
from .serializers import (
    WalletSerializer, WalletListSerializer, WalletTransactionSerializer,
    DepositSerializer, WithdrawalSerializer, PayoutSerializer, RejectSerializer,
    AdjustWalletSerializer, WalletStatsSerializer, WalletSettingsSerializer
)
from .services import WalletService, WalletAdminService


class WalletViewSet(ServiceErrorMixin, viewsets.GenericViewSet):
    """The current user's wallet and money requests"""
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]
    serializer_class = WalletSerializer

    def get_queryset(self):
        return Wallet.objects.owned_by(self.request.user)

    def _run(self, serializer_class, operation, response_status=status.HTTP_201_CREATED):
        serializer = serializer_class(data=self.request.data)
        serializer.is_valid(raise_exception=True)
        try:
            transaction_obj = operation(WalletService(user=self.request.user), serializer.validated_data)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(WalletTransactionSerializer(transaction_obj).data, status=response_status)

    @action(detail=False, methods=['get'])
    def me(self, request):
        """Get the current user's wallet"""
        try:
            wallet = WalletService(user=request.user).get_wallet()
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(WalletSerializer(wallet).data)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        try:
            stats = WalletService(user=request.user).get_stats()
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(WalletStatsSerializer(stats).data)

    @action(detail=False, methods=['post'])
    def deposit(self, request):
        return self._run(DepositSerializer, lambda service, data: service.deposit(
            amount=data['amount'],
            crypto_type=data.get('crypto_type'),
            tx_hash=data.get('tx_hash', ''),
        ))

    @action(detail=False, methods=['post'])
    def withdraw(self, request):
        return self._run(WithdrawalSerializer, lambda service, data: service.withdraw(
            amount=data['amount'],
            wallet_address=data['wallet_address'],
            crypto_type=data.get('crypto_type'),
        ))

    @action(detail=False, methods=['post'])
    def payout(self, request):
        return self._run(PayoutSerializer, lambda service, data: service.payout(
            amount=data['amount'],
            wallet_address=data['wallet_address'],
            crypto_type=data.get('crypto_type'),
            reason=data.get('reason', ''),
        ))


class WalletTransactionViewSet(ServiceErrorMixin, viewsets.ReadOnlyModelViewSet):
    """
    Wallet transactions.

    Investors see their own ledger, admins see their group's ledger and
    review pending requests.
    """
    serializer_class = WalletTransactionSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]
    filterset_fields = ['type', 'status', 'crypto_type']
    search_fields = ['description', 'tx_hash', 'wallet__user__email']
    ordering_fields = ['created_at', 'amount']

    def get_queryset(self):
        return WalletTransaction.objects.for_user(self.request.user).select_related('wallet__user')

    @action(detail=False, methods=['get'], permission_classes=[IsAdmin])
    def pending(self, request):
        queryset = self.filter_queryset(self.get_queryset().pending())
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def approve(self, request, pk=None):
        """Approve a pending deposit, withdrawal or payout"""
        transaction_obj = self.get_object()
        service = WalletAdminService(user=request.user)
        try:
            if transaction_obj.type == WalletTransaction.Type.DEPOSIT:
                transaction_obj = service.approve_deposit(transaction_obj.id)
            else:
                transaction_obj = service.approve_withdrawal(transaction_obj.id)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(transaction_obj).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def reject(self, request, pk=None):
        """Reject a pending deposit, withdrawal or payout"""
        transaction_obj = self.get_object()
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reason = serializer.validated_data['reason']

        service = WalletAdminService(user=request.user)
        try:
            if transaction_obj.type == WalletTransaction.Type.DEPOSIT:
                transaction_obj = service.reject_deposit(transaction_obj.id, reason)
            else:
                transaction_obj = service.reject_withdrawal(transaction_obj.id, reason)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(transaction_obj).data)


class AdminWalletViewSet(ServiceErrorMixin, viewsets.ReadOnlyModelViewSet):
    """Admin view of every wallet in the group"""
    serializer_class = WalletListSerializer
    permission_classes = [IsAdmin]
    search_fields = ['user__email', 'user__name']
    ordering_fields = ['balance', 'updated_at']

    def get_queryset(self):
        return Wallet.objects.for_user(self.request.user).select_related('user')

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return WalletSerializer
        return WalletListSerializer

    @action(detail=False, methods=['get'], url_path=r'users/(?P<user_id>[^/.]+)')
    def user_wallet(self, request, user_id=None):
        try:
            detail = WalletAdminService(user=request.user).get_user_wallet_detail(user_id)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response({
            'wallet': WalletSerializer(detail['wallet']).data,
            'stats': WalletStatsSerializer(detail['stats']).data,
            'transactions': WalletTransactionSerializer(detail['transactions'], many=True).data,
        })

    @action(detail=False, methods=['post'])
    def fund(self, request):
        serializer = AdjustWalletSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            transaction_obj = WalletAdminService(user=request.user).fund_user_wallet(
                data['user_id'], data['amount'], data['reason']
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(WalletTransactionSerializer(transaction_obj).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def deduct(self, request):
        serializer = AdjustWalletSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            transaction_obj = WalletAdminService(user=request.user).deduct_from_user_wallet(
                data['user_id'], data['amount'], data['reason']
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(WalletTransactionSerializer(transaction_obj).data, status=status.HTTP_201_CREATED)


class WalletSettingsView(ServiceErrorMixin, APIView):
    """Deposit addresses: readable by every user, writable by admins"""

    def get_permissions(self):
        if self.request.method in permissions.SAFE_METHODS:
            return [permissions.IsAuthenticated(), IsNotBanned()]
        return [IsAdmin()]

    def get(self, request):
        return Response(WalletService(user=request.user).get_wallet_settings())

    def put(self, request):
        serializer = WalletSettingsSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            WalletAdminService(user=request.user).update_wallet_settings(**serializer.validated_data)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(WalletService(user=request.user).get_wallet_settings())

    patch = put
