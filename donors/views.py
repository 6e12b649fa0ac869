from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.utils import timezone
from .models import Donor
from .context import get_request_donor
from .filters import DonorSearchFilter
from .serializers import DonorListSerializer, DonorDetailSerializer, DonorProfileUpdateSerializer
import logging

logger = logging.getLogger(__name__)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def donor_profile(request):
    """Allow donors to view and update their own profile"""
    try:
        donor = get_request_donor(request)

        if request.method == 'GET':
            return Response(DonorDetailSerializer(donor).data)

        serializer = DonorProfileUpdateSerializer(donor, data=request.data, partial=True)
        if serializer.is_valid():
            donor = serializer.save()
            logger.info(f"Donor profile updated: {donor.id}")
            return Response(DonorDetailSerializer(donor).data)
        return Response({'message': 'Invalid profile data', 'details': serializer.errors},
                        status=status.HTTP_400_BAD_REQUEST)

    except Donor.DoesNotExist:
        return Response({'message': 'Donor profile not found'}, status=status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.error(f"Donor profile error: {str(e)}")
        return Response({'message': 'Failed to process donor profile'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def search_donors(request):
    """Active donors matching location and blood group, available ones only by default"""
    try:
        now = timezone.now()
        donors = Donor.objects.active().select_related('user')

        me = Donor.objects.filter(user=request.user).first()
        if me is not None:
            donors = donors.exclude(pk=me.pk)

        donor_filter = DonorSearchFilter(request.query_params, queryset=donors)
        if not donor_filter.is_valid():
            return Response({'message': 'Invalid search parameters', 'details': donor_filter.errors},
                            status=status.HTTP_400_BAD_REQUEST)

        results = donor_filter.qs
        serializer = DonorListSerializer(results, many=True, context={'now': now})
        return Response(serializer.data)

    except Exception as e:
        logger.error(f"Donor search error: {str(e)}")
        return Response({'message': 'Failed to search donors'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def donation_history(request):
    """Completed requests where the authenticated donor gave or received blood"""
    try:
        donor = get_request_donor(request)

        from donation_requests.models import BloodRequest
        from donation_requests.serializers import BloodRequestSerializer

        donations = BloodRequest.objects.filter(
            Q(donor=donor) | Q(requester=donor),
            status=BloodRequest.STATUS_COMPLETED,
        ).select_related('donor', 'requester').order_by('-updated_at')

        return Response(BloodRequestSerializer(donations, many=True).data)

    except Donor.DoesNotExist:
        return Response({'message': 'Donor profile not found'}, status=status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.error(f"Donation history error: {str(e)}")
        return Response({'message': 'Failed to fetch donation history'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
