from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    WalletViewSet, WalletTransactionViewSet, AdminWalletViewSet, WalletSettingsView
)

router = DefaultRouter()
router.register(r'wallet/transactions', WalletTransactionViewSet, basename='wallet-transaction')
router.register(r'wallet', WalletViewSet, basename='wallet')
router.register(r'admin/wallets', AdminWalletViewSet, basename='admin-wallet')

urlpatterns = [
    path('wallet/settings/', WalletSettingsView.as_view(), name='wallet-settings'),
    path('', include(router.urls)),
]
