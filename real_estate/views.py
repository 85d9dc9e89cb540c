from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsAdminOrReadOnly, IsNotBanned
from core.mixins import ServiceErrorMixin
from core.services import ServiceError

from .models import Property, RealEstateInvestment, PropertyTransaction
from .serializers import (
    PropertySerializer, RealEstateInvestmentSerializer, InvestmentCreateSerializer,
    InvestmentUpdateSerializer, PropertyTransactionSerializer, PurchaseSerializer,
    StatusUpdateSerializer, PortfolioSerializer
)
from .services import PropertyService, RealEstateService, RealEstateAdminService


class PropertyViewSet(ServiceErrorMixin, viewsets.ModelViewSet):
    """
    Property listings. Everyone in the group can browse; admins manage.
    """
    serializer_class = PropertySerializer
    permission_classes = [IsAdminOrReadOnly, IsNotBanned]
    filterset_fields = ['status']
    search_fields = ['name', 'location', 'description']
    ordering_fields = ['price', 'created_at']

    def get_queryset(self):
        return Property.objects.for_user(self.request.user)

    def perform_create(self, serializer):
        serializer.save(group=self.request.user.group)

    def destroy(self, request, *args, **kwargs):
        try:
            PropertyService(user=request.user).delete_property(self.get_object())
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], permission_classes=[permissions.IsAuthenticated, IsNotBanned])
    def purchase(self, request, pk=None):
        """Buy the property in full or in installments"""
        serializer = PurchaseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            purchase = RealEstateService(user=request.user).purchase_property(
                pk,
                serializer.validated_data['type'],
                serializer.validated_data.get('installments'),
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(PropertyTransactionSerializer(purchase).data, status=status.HTTP_201_CREATED)


class RealEstateInvestmentViewSet(ServiceErrorMixin, viewsets.ReadOnlyModelViewSet):
    """Real estate plan investments"""
    serializer_class = RealEstateInvestmentSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]
    filterset_fields = ['status', 'type']
    ordering_fields = ['created_at', 'amount', 'end_date']

    def get_queryset(self):
        return RealEstateInvestment.objects.for_user(self.request.user).select_related('user', 'property')

    def create(self, request):
        serializer = InvestmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            property_obj = None
            if data.get('property_id'):
                property_obj = RealEstateService(user=request.user).get_or_404(
                    Property, queryset=Property.objects.for_user(request.user), id=data['property_id']
                )
            investment = RealEstateService(user=request.user).create_investment(
                data['type'], data['amount'], data['reinvest'], property_obj
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(investment).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = InvestmentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            investment = RealEstateService(user=request.user).update_investment(
                pk, serializer.validated_data['reinvest']
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(investment).data)

    @action(detail=True, methods=['post'])
    def withdraw(self, request, pk=None):
        try:
            investment = RealEstateService(user=request.user).withdraw_investment(pk)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(investment).data)

    @action(detail=True, methods=['post'], url_path='status', permission_classes=[IsAdmin])
    def update_status(self, request, pk=None):
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            investment = RealEstateAdminService(user=request.user).update_investment_status(
                pk, serializer.validated_data['status']
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(investment).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def cancel(self, request, pk=None):
        """Cancel an active investment and refund the principal"""
        try:
            investment = RealEstateAdminService(user=request.user).cancel_investment(pk)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(investment).data)

    @action(detail=False, methods=['get'])
    def portfolio(self, request):
        user_id = request.query_params.get('user')
        try:
            if user_id:
                data = RealEstateAdminService(user=request.user).portfolio(user_id)
            else:
                data = RealEstateService(user=request.user).portfolio()
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(PortfolioSerializer(data).data)


class PropertyTransactionViewSet(ServiceErrorMixin, viewsets.ReadOnlyModelViewSet):
    """Property purchases"""
    serializer_class = PropertyTransactionSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]
    filterset_fields = ['status', 'type']
    ordering_fields = ['created_at', 'next_payment_due']

    def get_queryset(self):
        return PropertyTransaction.objects.for_user(self.request.user).select_related('user', 'property')

    @action(detail=True, methods=['post'])
    def pay_installment(self, request, pk=None):
        try:
            purchase = RealEstateService(user=request.user).make_installment_payment(pk)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(purchase).data)

    @action(detail=True, methods=['post'], url_path='status', permission_classes=[IsAdmin])
    def update_status(self, request, pk=None):
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            purchase = RealEstateAdminService(user=request.user).update_property_transaction_status(
                pk, serializer.validated_data['status']
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(purchase).data)
