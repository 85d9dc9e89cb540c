from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import PropertyViewSet, RealEstateInvestmentViewSet, PropertyTransactionViewSet

router = DefaultRouter()
router.register(r'real-estate/properties', PropertyViewSet, basename='property')
router.register(r'real-estate/investments', RealEstateInvestmentViewSet, basename='real-estate-investment')
router.register(r'real-estate/transactions', PropertyTransactionViewSet, basename='property-transaction')

urlpatterns = [
    path('', include(router.urls)),
]
