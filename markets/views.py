from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsAdminOrReadOnly, IsNotBanned
from core.mixins import ServiceErrorMixin
from core.services import ServiceError

from .models import MarketInvestmentPlan, MarketInvestment
from .serializers import (
    MarketInvestmentPlanSerializer, MarketInvestmentSerializer,
    MarketInvestSerializer, MarketMatureSerializer, MarketPortfolioSerializer
)
from .services import MarketPlanService, MarketInvestmentService


class MarketInvestmentPlanViewSet(ServiceErrorMixin, viewsets.ModelViewSet):
    serializer_class = MarketInvestmentPlanSerializer
    permission_classes = [IsAdminOrReadOnly, IsNotBanned]
    filterset_fields = ['type', 'is_active']
    ordering_fields = ['min_amount', 'return_rate']

    def get_queryset(self):
        queryset = MarketInvestmentPlan.objects.for_user(self.request.user)
        if not self.request.user.is_platform_admin:
            queryset = queryset.filter(is_active=True)
        return queryset

    def perform_create(self, serializer):
        serializer.save(group=self.request.user.group)

    def destroy(self, request, *args, **kwargs):
        try:
            MarketPlanService(user=request.user).delete_plan(self.get_object())
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MarketInvestmentViewSet(ServiceErrorMixin, viewsets.ReadOnlyModelViewSet):
    """Market investments: own rows for investors, the group's for admins"""
    serializer_class = MarketInvestmentSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]
    filterset_fields = ['status', 'plan']
    ordering_fields = ['created_at', 'amount', 'end_date']

    def get_queryset(self):
        return MarketInvestment.objects.for_user(self.request.user).select_related('user', 'plan')

    def create(self, request):
        serializer = MarketInvestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            investment = MarketInvestmentService(user=request.user).invest(
                serializer.validated_data['plan_id'], serializer.validated_data['amount']
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(investment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def mature(self, request, pk=None):
        serializer = MarketMatureSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            investment = MarketInvestmentService(user=request.user).mature(
                pk, serializer.validated_data.get('actual_return')
            )
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(investment).data)

    @action(detail=False, methods=['get'])
    def portfolio(self, request):
        data = MarketInvestmentService(user=request.user).portfolio()
        return Response(MarketPortfolioSerializer(data).data)
