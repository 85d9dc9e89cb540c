from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsAdminOrReadOnly, IsNotBanned
from core.mixins import ServiceErrorMixin
from core.services import ServiceError

from .models import GreenEnergyPlan, GreenEnergyInvestment, Equipment, EquipmentTransaction
from .serializers import (
    GreenEnergyPlanSerializer, GreenEnergyInvestmentSerializer, InvestSerializer,
    MatureSerializer, EquipmentSerializer, EquipmentTransactionSerializer,
    EquipmentPurchaseSerializer, EquipmentStatusSerializer, DeliveryAddressSerializer,
    ConfirmDeliverySerializer, GreenEnergyPortfolioSerializer
)
from .services import GreenEnergyPlanService, GreenEnergyService, EquipmentService


class GreenEnergyPlanViewSet(ServiceErrorMixin, viewsets.ModelViewSet):
    """Investment plans. Investors only see active plans."""
    serializer_class = GreenEnergyPlanSerializer
    permission_classes = [IsAdminOrReadOnly, IsNotBanned]
    filterset_fields = ['type', 'is_active']
    ordering_fields = ['min_amount', 'return_rate', 'created_at']

    def get_queryset(self):
        queryset = GreenEnergyPlan.objects.for_user(self.request.user)
        if not self.request.user.is_platform_admin:
            queryset = queryset.filter(is_active=True)
        return queryset

    def perform_create(self, serializer):
        serializer.save(group=self.request.user.group)

    def destroy(self, request, *args, **kwargs):
        try:
            GreenEnergyPlanService(user=request.user).delete_plan(self.get_object())
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


class GreenEnergyInvestmentViewSet(ServiceErrorMixin, viewsets.ReadOnlyModelViewSet):
    """Green energy investments"""
    serializer_class = GreenEnergyInvestmentSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]
    filterset_fields = ['status', 'plan']
    ordering_fields = ['created_at', 'amount', 'end_date']

    def get_queryset(self):
        return GreenEnergyInvestment.objects.for_user(self.request.user).select_related('user', 'plan')

    def create(self, request):
        serializer = InvestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            investment = GreenEnergyService(user=request.user).invest(
                data['plan_id'], data['amount'], data['reinvest']
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(investment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def mature(self, request, pk=None):
        serializer = MatureSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            investment = GreenEnergyService(user=request.user).mature(
                pk, serializer.validated_data.get('actual_return')
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(investment).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def cancel(self, request, pk=None):
        try:
            investment = GreenEnergyService(user=request.user).cancel(pk)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(investment).data)

    @action(detail=False, methods=['get'])
    def portfolio(self, request):
        data = GreenEnergyService(user=request.user).portfolio()
        return Response(GreenEnergyPortfolioSerializer(data, context={'request': request}).data)


class EquipmentViewSet(ServiceErrorMixin, viewsets.ModelViewSet):
    """Equipment catalogue"""
    serializer_class = EquipmentSerializer
    permission_classes = [IsAdminOrReadOnly, IsNotBanned]
    filterset_fields = ['type', 'status']
    search_fields = ['name', 'description']
    ordering_fields = ['price', 'created_at']

    def get_queryset(self):
        return Equipment.objects.for_user(self.request.user)

    def perform_create(self, serializer):
        serializer.save(group=self.request.user.group)

    def destroy(self, request, *args, **kwargs):
        try:
            EquipmentService(user=request.user).delete_equipment(self.get_object())
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], permission_classes=[permissions.IsAuthenticated, IsNotBanned])
    def purchase(self, request, pk=None):
        serializer = EquipmentPurchaseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = EquipmentService(user=request.user).purchase(
                pk,
                serializer.validated_data['quantity'],
                serializer.validated_data['delivery_address'],
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(
            EquipmentTransactionSerializer(order, context={'request': request}).data,
            status=status.HTTP_201_CREATED
        )


class EquipmentTransactionViewSet(ServiceErrorMixin, viewsets.ReadOnlyModelViewSet):
    """Equipment orders and deliveries"""
    serializer_class = EquipmentTransactionSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]
    filterset_fields = ['status']
    ordering_fields = ['created_at', 'estimated_delivery_date']

    def get_queryset(self):
        return EquipmentTransaction.objects.for_user(self.request.user).select_related('user', 'equipment')

    @action(detail=True, methods=['post'], url_path='status', permission_classes=[IsAdmin])
    def update_status(self, request, pk=None):
        serializer = EquipmentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = EquipmentService(user=request.user).update_transaction_status(
                pk,
                serializer.validated_data['status'],
                serializer.validated_data.get('tracking_number', ''),
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(order).data)

    @action(detail=True, methods=['post'])
    def delivery_address(self, request, pk=None):
        serializer = DeliveryAddressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = EquipmentService(user=request.user).update_delivery_address(pk, serializer.validated_data)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(order).data)

    @action(detail=True, methods=['post'])
    def confirm_delivery(self, request, pk=None):
        serializer = ConfirmDeliverySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = EquipmentService(user=request.user).confirm_delivery(pk, serializer.validated_data['pin'])
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(order).data)
