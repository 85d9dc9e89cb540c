from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import MarketInvestmentPlanViewSet, MarketInvestmentViewSet

router = DefaultRouter()
router.register(r'markets/plans', MarketInvestmentPlanViewSet, basename='market-plan')
router.register(r'markets/investments', MarketInvestmentViewSet, basename='market-investment')

urlpatterns = [
    path('', include(router.urls)),
]
