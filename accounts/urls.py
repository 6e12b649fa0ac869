from django.urls import path
from . import views

urlpatterns = [
    path('signup', views.signup, name='signup'),
    path('login', views.user_login, name='user-login'),
    path('check-email', views.check_email, name='check-email'),
    path('check-phone', views.check_phone, name='check-phone'),
    path('change-password', views.change_password, name='change-password'),
]
