from django.db import models
from django.db.models import F, Q
from donors.models import Donor


class BloodRequest(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_ACCEPTED = 'accepted'
    STATUS_REJECTED = 'rejected'
    STATUS_CANCELLED = 'cancelled'
    STATUS_COMPLETED = 'completed'

    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACCEPTED, 'Accepted'),
        (STATUS_REJECTED, 'Rejected'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_COMPLETED, 'Completed'),
    )

    # Requests are the donation audit trail and outlive neither party's deletion
    requester = models.ForeignKey(Donor, on_delete=models.PROTECT, related_name='sent_requests')
    donor = models.ForeignKey(Donor, on_delete=models.PROTECT, related_name='received_requests')

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    note = models.TextField(blank=True)
    rating = models.PositiveSmallIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=~Q(requester=F('donor')),
                name='blood_request_distinct_parties',
            ),
            models.CheckConstraint(
                condition=Q(rating__isnull=True) | Q(rating__gte=1, rating__lte=5),
                name='blood_request_rating_range',
            ),
        ]

    def __str__(self):
        return f"Request {self.id}: {self.requester.name} -> {self.donor.name} ({self.status})"

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING
