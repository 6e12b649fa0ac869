import logging

from django.db.models import F, Count, Sum
from django.utils import timezone

from .models import Donor

logger = logging.getLogger(__name__)


def record_rating(donor_id, rating):
    """Add one rating to the donor's running sum and count."""
    Donor.objects.filter(pk=donor_id).update(
        rating_sum=F('rating_sum') + rating,
        rating_count=F('rating_count') + 1,
        updated_at=timezone.now(),
    )


def recompute_rating_aggregate(donor):
    """Rebuild the aggregate from every rated, completed request received by ``donor``."""
    from donation_requests.models import BloodRequest

    totals = BloodRequest.objects.filter(
        donor=donor,
        status=BloodRequest.STATUS_COMPLETED,
        rating__isnull=False,
    ).aggregate(total=Sum('rating'), count=Count('id'))

    donor.rating_sum = totals['total'] or 0
    donor.rating_count = totals['count']
    donor.save(update_fields=['rating_sum', 'rating_count', 'updated_at'])

    logger.info(f"Rating aggregate rebuilt for donor {donor.id}: {donor.rating_sum}/{donor.rating_count}")
    return donor.avg_rating, donor.rating_count
