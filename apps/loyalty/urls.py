from django.urls import path
from . import views

urlpatterns = [
    path('dashboard/', views.get_dashboard, name='loyalty-dashboard'),
    path('history/', views.get_history, name='loyalty-history'),
    path('tier-info/', views.get_tier_info, name='loyalty-tier-info'),
    path('redeem/', views.redeem_points, name='loyalty-redeem'),
    path('calculate-discount/', views.calculate_discount, name='loyalty-calculate-discount'),
    path('apply-referral/', views.apply_referral, name='loyalty-apply-referral'),
    path('birthday-bonus/', views.award_birthday_bonus, name='loyalty-birthday-bonus'),
]
