from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status
from django.db.models import Q
from donors.context import get_request_donor
from donors.models import Donor
from . import lifecycle
from .exceptions import RequestLifecycleError
from .models import BloodRequest
from .serializers import BloodRequestSerializer, CreateBloodRequestSerializer, RequestNoteSerializer
from .email_utils import send_blood_request_email, send_request_status_email
import logging

logger = logging.getLogger(__name__)


def lifecycle_error_response(error):
    logger.warning(f"Blood request operation refused ({error.code}): {error.message}")
    return Response(error.as_response_data(), status=error.status_code)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_blood_request(request):
    try:
        requester = get_request_donor(request)

        serializer = CreateBloodRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'message': 'donorId is required', 'details': serializer.errors},
                            status=status.HTTP_400_BAD_REQUEST)

        blood_request = lifecycle.create(
            requester.id,
            serializer.validated_data['donorId'],
            note=serializer.validated_data.get('note'),
        )
        send_blood_request_email(blood_request)

        return Response(BloodRequestSerializer(blood_request).data, status=status.HTTP_201_CREATED)

    except Donor.DoesNotExist:
        return Response({'message': 'Donor profile not found'}, status=status.HTTP_404_NOT_FOUND)
    except RequestLifecycleError as e:
        return lifecycle_error_response(e)
    except Exception as e:
        logger.error(f"Blood request creation error: {str(e)}")
        return Response({'message': 'Failed to send blood request'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_requests(request):
    try:
        donor = get_request_donor(request)
        request_type = request.query_params.get('type')

        if request_type == 'sent':
            blood_requests = BloodRequest.objects.filter(requester=donor)
        elif request_type == 'received':
            blood_requests = BloodRequest.objects.filter(donor=donor)
        elif not request_type:
            blood_requests = BloodRequest.objects.filter(Q(requester=donor) | Q(donor=donor))
        else:
            return Response({'message': "type must be 'sent' or 'received'"}, status=status.HTTP_400_BAD_REQUEST)

        blood_requests = blood_requests.select_related('requester', 'donor')
        return Response(BloodRequestSerializer(blood_requests, many=True).data)

    except Donor.DoesNotExist:
        return Response({'message': 'Donor profile not found'}, status=status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.error(f"Requests fetch error: {str(e)}")
        return Response({'message': 'Failed to fetch requests'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def reject_request(request, request_id):
    try:
        donor = get_request_donor(request)

        serializer = RequestNoteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'message': 'Invalid note', 'details': serializer.errors},
                            status=status.HTTP_400_BAD_REQUEST)

        blood_request = lifecycle.reject(request_id, donor.id, note=serializer.validated_data.get('note'))
        send_request_status_email(blood_request, blood_request.requester)

        return Response(BloodRequestSerializer(blood_request).data)

    except Donor.DoesNotExist:
        return Response({'message': 'Donor profile not found'}, status=status.HTTP_404_NOT_FOUND)
    except RequestLifecycleError as e:
        return lifecycle_error_response(e)
    except Exception as e:
        logger.error(f"Request rejection error: {str(e)}")
        return Response({'message': 'Failed to reject request'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def cancel_request(request, request_id):
    try:
        requester = get_request_donor(request)

        serializer = RequestNoteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'message': 'Invalid note', 'details': serializer.errors},
                            status=status.HTTP_400_BAD_REQUEST)

        blood_request = lifecycle.cancel(request_id, requester.id, note=serializer.validated_data.get('note'))
        send_request_status_email(blood_request, blood_request.donor)

        return Response(BloodRequestSerializer(blood_request).data)

    except Donor.DoesNotExist:
        return Response({'message': 'Donor profile not found'}, status=status.HTTP_404_NOT_FOUND)
    except RequestLifecycleError as e:
        return lifecycle_error_response(e)
    except Exception as e:
        logger.error(f"Request cancellation error: {str(e)}")
        return Response({'message': 'Failed to cancel request'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def complete_request(request, request_id):
    try:
        requester = get_request_donor(request)

        if not isinstance(request.data, dict):
            return Response({'message': 'Request body must be a JSON object'},
                            status=status.HTTP_400_BAD_REQUEST)

        # Non-integer or out-of-range ratings raise InvalidRating
        rating = request.data.get('rating')
        blood_request = lifecycle.complete(request_id, requester.id, rating=rating)

        return Response(BloodRequestSerializer(blood_request).data)

    except Donor.DoesNotExist:
        return Response({'message': 'Donor profile not found'}, status=status.HTTP_404_NOT_FOUND)
    except RequestLifecycleError as e:
        return lifecycle_error_response(e)
    except Exception as e:
        logger.error(f"Request completion error: {str(e)}")
        return Response({'message': 'Failed to complete request'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
