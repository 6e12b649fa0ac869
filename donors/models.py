from django.db import models
from django.db.models import Q
from django.utils import timezone
from accounts.models import User


class DonorQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status='active')

    def available(self, now=None):
        """Donors that can receive a new request at ``now``, as ``Donor.is_available_at`` in SQL"""
        now = now or timezone.now()
        return self.active().filter(Q(next_available_at__isnull=True) | Q(next_available_at__lte=now))


class Donor(models.Model):
    BLOOD_GROUP_CHOICES = (
        ('A+', 'A+'),
        ('A-', 'A-'),
        ('B+', 'B+'),
        ('B-', 'B-'),
        ('AB+', 'AB+'),
        ('AB-', 'AB-'),
        ('O+', 'O+'),
        ('O-', 'O-'),
    )

    STATUS_CHOICES = (
        ('active', 'Active'),
        ('suspended', 'Suspended'),
    )

    user = models.OneToOneField(User, on_delete=models.CASCADE)
    name = models.CharField(max_length=200)
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES)
    location = models.CharField(max_length=200)

    # Moderation
    verified = models.BooleanField(default=False)
    verification_notes = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    status_reason = models.TextField(blank=True)

    # Availability and donation history
    next_available_at = models.DateTimeField(null=True, blank=True)
    last_donation_at = models.DateTimeField(null=True, blank=True)
    total_donations = models.IntegerField(default=0)

    # Running rating aggregate, average derived on read
    rating_sum = models.IntegerField(default=0)
    rating_count = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = DonorQuerySet.as_manager()

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.blood_group})"

    @property
    def email(self):
        return self.user.email

    @property
    def phone_number(self):
        return self.user.phone_number

    @property
    def avg_rating(self):
        if not self.rating_count:
            return None
        return self.rating_sum / self.rating_count

    def is_available_at(self, now=None):
        if self.next_available_at is None:
            return True
        return self.next_available_at <= (now or timezone.now())
