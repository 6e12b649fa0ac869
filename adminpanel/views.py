from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework import status
from django.contrib.auth import authenticate
from django.core.paginator import Paginator, EmptyPage
from django.db.models import Count, ProtectedError
from accounts.serializers import AdminLoginSerializer, UserProfileSerializer
from accounts.views import issue_tokens
from donors.filters import AdminDonorFilter
from donors.models import Donor
from donors.serializers import AdminDonorSerializer, DonorUpdateSerializer
from donation_requests.models import BloodRequest
from donation_requests.serializers import BloodRequestSerializer
from .serializers import DonorStatusSerializer, DonorVerificationSerializer
import logging

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def permission_denied():
    return Response({'message': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)


def parse_positive_int(value, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


@api_view(['POST'])
@permission_classes([AllowAny])
def admin_login(request):
    try:
        serializer = AdminLoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'message': 'Username and password are required', 'details': serializer.errors},
                            status=status.HTTP_400_BAD_REQUEST)

        user = authenticate(
            username=serializer.validated_data['username'],
            password=serializer.validated_data['password']
        )
        if not user or not user.is_admin:
            return Response({'message': 'Invalid admin credentials'}, status=status.HTTP_401_UNAUTHORIZED)

        logger.info(f"Admin logged in: {user.username}")
        return Response({
            **issue_tokens(user),
            'user': UserProfileSerializer(user).data,
        })
    except Exception as e:
        logger.error(f"Admin login error: {str(e)}")
        return Response({'message': 'Admin login failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def admin_stats(request):
    """Headline numbers for the admin dashboard"""
    try:
        if not request.user.is_admin:
            return permission_denied()

        by_group = {group: 0 for group, _ in Donor.BLOOD_GROUP_CHOICES}
        for row in Donor.objects.values('blood_group').annotate(total=Count('id')):
            by_group[row['blood_group']] = row['total']

        return Response({
            'activeRequests': BloodRequest.objects.filter(status=BloodRequest.STATUS_PENDING).count(),
            'totalDonors': Donor.objects.count(),
            'donorsByBloodGroup': by_group,
        })
    except Exception as e:
        logger.error(f"Admin stats error: {str(e)}")
        return Response({'message': 'Failed to fetch admin stats'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def admin_requests(request):
    try:
        if not request.user.is_admin:
            return permission_denied()

        blood_requests = BloodRequest.objects.select_related('requester', 'donor')
        request_status = request.query_params.get('status')
        if request_status:
            blood_requests = blood_requests.filter(status=request_status)

        return Response(BloodRequestSerializer(blood_requests, many=True).data)
    except Exception as e:
        logger.error(f"Admin requests fetch error: {str(e)}")
        return Response({'message': 'Failed to fetch blood requests'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def admin_donors(request):
    try:
        if not request.user.is_admin:
            return permission_denied()

        donor_filter = AdminDonorFilter(request.query_params, queryset=Donor.objects.select_related('user'))
        if not donor_filter.is_valid():
            return Response({'message': 'Invalid filter parameters', 'details': donor_filter.errors},
                            status=status.HTTP_400_BAD_REQUEST)

        page_number = parse_positive_int(request.query_params.get('page'), 1)
        limit = min(parse_positive_int(request.query_params.get('limit'), DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)

        paginator = Paginator(donor_filter.qs, limit)
        try:
            items = paginator.page(page_number).object_list
        except EmptyPage:
            items = []

        return Response({
            'items': AdminDonorSerializer(items, many=True).data,
            'total': paginator.count,
            'page': page_number,
            'limit': limit,
        })
    except Exception as e:
        logger.error(f"Admin donor list error: {str(e)}")
        return Response({'message': 'Failed to fetch donors'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def admin_donor_detail(request, donor_id):
    try:
        if not request.user.is_admin:
            return permission_denied()

        donor = Donor.objects.select_related('user').get(id=donor_id)

        if request.method == 'GET':
            return Response(AdminDonorSerializer(donor).data)

        if request.method == 'PATCH':
            serializer = DonorUpdateSerializer(donor, data=request.data, partial=True)
            if not serializer.is_valid():
                return Response({'message': 'Invalid donor data', 'details': serializer.errors},
                                status=status.HTTP_400_BAD_REQUEST)
            donor = serializer.save()
            logger.info(f"Donor {donor.id} updated by admin {request.user.username}")
            return Response(AdminDonorSerializer(donor).data)

        try:
            # Deleting the user cascades to the donor profile
            donor.user.delete()
        except ProtectedError:
            return Response({
                'message': 'Donor has blood request history and cannot be deleted; suspend the account instead'
            }, status=status.HTTP_409_CONFLICT)

        logger.info(f"Donor {donor_id} deleted by admin {request.user.username}")
        return Response({'message': 'Donor deleted', 'id': donor_id})

    except Donor.DoesNotExist:
        return Response({'message': 'Donor not found'}, status=status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.error(f"Admin donor detail error: {str(e)}")
        return Response({'message': 'Failed to process donor'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def admin_donor_status(request, donor_id):
    try:
        if not request.user.is_admin:
            return permission_denied()

        donor = Donor.objects.select_related('user').get(id=donor_id)
        serializer = DonorStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'message': 'Invalid status', 'details': serializer.errors},
                            status=status.HTTP_400_BAD_REQUEST)

        donor.status = serializer.validated_data['status']
        donor.status_reason = serializer.validated_data.get('reason') or ''
        donor.save(update_fields=['status', 'status_reason', 'updated_at'])

        logger.info(f"Donor {donor.id} set to {donor.status} by admin {request.user.username}")
        return Response(AdminDonorSerializer(donor).data)

    except Donor.DoesNotExist:
        return Response({'message': 'Donor not found'}, status=status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.error(f"Admin donor status error: {str(e)}")
        return Response({'message': 'Failed to update donor status'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def admin_donor_verify(request, donor_id):
    try:
        if not request.user.is_admin:
            return permission_denied()

        donor = Donor.objects.select_related('user').get(id=donor_id)
        serializer = DonorVerificationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'message': 'Invalid verification', 'details': serializer.errors},
                            status=status.HTTP_400_BAD_REQUEST)

        donor.verified = serializer.validated_data['verified']
        donor.verification_notes = serializer.validated_data.get('note') or ''
        donor.save(update_fields=['verified', 'verification_notes', 'updated_at'])

        logger.info(f"Donor {donor.id} verified={donor.verified} by admin {request.user.username}")
        return Response(AdminDonorSerializer(donor).data)

    except Donor.DoesNotExist:
        return Response({'message': 'Donor not found'}, status=status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.error(f"Admin donor verification error: {str(e)}")
        return Response({'message': 'Failed to verify donor'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
