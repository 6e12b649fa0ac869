from django.urls import path
from . import views

urlpatterns = [
    path('login', views.admin_login, name='admin-login'),
    path('stats', views.admin_stats, name='admin-stats'),
    path('requests', views.admin_requests, name='admin-requests'),
    path('donors', views.admin_donors, name='admin-donors'),
    path('donors/<int:donor_id>', views.admin_donor_detail, name='admin-donor-detail'),
    path('donors/<int:donor_id>/status', views.admin_donor_status, name='admin-donor-status'),
    path('donors/<int:donor_id>/verify', views.admin_donor_verify, name='admin-donor-verify'),
]
