from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import ReferralViewSet, ReferralSettingsView, ReferralCommissionViewSet

router = DefaultRouter()
router.register(r'referrals/commissions', ReferralCommissionViewSet, basename='referral-commission')
router.register(r'referrals', ReferralViewSet, basename='referral')

urlpatterns = [
    path('referrals/settings/', ReferralSettingsView.as_view(), name='referral-settings'),
    path('', include(router.urls)),
]
