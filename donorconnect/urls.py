from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('django-admin/', admin.site.urls),
    path('api/auth/', include('accounts.urls')),
    path('api/donor/', include('donors.urls')),
    path('api/donor/', include('donation_requests.urls')),
    path('api/admin/', include('adminpanel.urls')),
]
