from django.urls import path
from . import views

urlpatterns = [
    path('request', views.create_blood_request, name='create-blood-request'),  # /api/donor/request
    path('requests', views.my_requests, name='my-requests'),  # /api/donor/requests?type=sent|received
    path('requests/<int:request_id>/reject', views.reject_request, name='reject-request'),
    path('requests/<int:request_id>/cancel', views.cancel_request, name='cancel-request'),
    path('requests/<int:request_id>/complete', views.complete_request, name='complete-request'),
]
