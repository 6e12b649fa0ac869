from django.urls import path
from . import views

urlpatterns = [
    path('profile', views.donor_profile, name='donor-profile'),  # /api/donor/profile
    path('search', views.search_donors, name='donor-search'),  # /api/donor/search
    path('history', views.donation_history, name='donation-history'),  # /api/donor/history
]
