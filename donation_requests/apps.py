from django.apps import AppConfig


class DonationRequestsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'donation_requests'
    verbose_name = 'Blood requests'
