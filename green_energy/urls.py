from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    GreenEnergyPlanViewSet, GreenEnergyInvestmentViewSet,
    EquipmentViewSet, EquipmentTransactionViewSet
)

router = DefaultRouter()
router.register(r'green-energy/plans', GreenEnergyPlanViewSet, basename='green-energy-plan')
router.register(r'green-energy/investments', GreenEnergyInvestmentViewSet, basename='green-energy-investment')
router.register(r'green-energy/equipment', EquipmentViewSet, basename='equipment')
router.register(r'green-energy/orders', EquipmentTransactionViewSet, basename='equipment-transaction')

urlpatterns = [
    path('', include(router.urls)),
]
