from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.tokens import RefreshToken
from django.contrib.auth import authenticate
from .models import User
from .serializers import (
    SignupSerializer, UserLoginSerializer, ChangePasswordSerializer, UserProfileSerializer
)
import logging

logger = logging.getLogger(__name__)


def issue_tokens(user):
    refresh = RefreshToken.for_user(user)
    return {
        'token': str(refresh.access_token),
        'refresh': str(refresh),
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def signup(request):
    try:
        serializer = SignupSerializer(data=request.data)
        if serializer.is_valid():
            donor = serializer.save()

            logger.info(f"New donor registered: {donor.user.email}")
            return Response({
                'message': 'Account created successfully.',
                'userId': donor.user.id,
                'donorId': donor.id,
            }, status=status.HTTP_201_CREATED)

        return Response({
            'message': 'Signup failed',
            'details': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    except Exception as e:
        logger.error(f"Donor signup error: {str(e)}")
        return Response({'message': 'Signup failed due to server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST'])
@permission_classes([AllowAny])
def user_login(request):
    try:
        serializer = UserLoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'message': 'Email and password are required', 'details': serializer.errors},
                            status=status.HTTP_400_BAD_REQUEST)

        email = serializer.validated_data['email'].strip().lower()
        password = serializer.validated_data['password']

        account = User.objects.filter(email__iexact=email).first()
        user = authenticate(username=account.username, password=password) if account else None
        if not user:
            return Response({'message': 'Invalid email or password'}, status=status.HTTP_401_UNAUTHORIZED)

        donor = getattr(user, 'donor', None)
        if donor is not None and donor.status == 'suspended':
            logger.warning(f"Suspended donor attempted login: {email}")
            return Response({'message': 'Account suspended'}, status=status.HTTP_403_FORBIDDEN)

        logger.info(f"User logged in: {email}")
        return Response({
            **issue_tokens(user),
            'user': UserProfileSerializer(user).data,
        }, status=status.HTTP_200_OK)

    except Exception as e:
        logger.error(f"Login error: {str(e)}")
        return Response({'message': 'Login failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([AllowAny])
def check_email(request):
    email = request.query_params.get('email', '').strip()
    if not email:
        return Response({'message': 'email is required'}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'exists': User.objects.filter(email__iexact=email).exists()})


@api_view(['GET'])
@permission_classes([AllowAny])
def check_phone(request):
    phone = request.query_params.get('phone', '').strip()
    if not phone:
        return Response({'message': 'phone is required'}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'exists': User.objects.filter(phone_number=phone).exists()})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password(request):
    try:
        serializer = ChangePasswordSerializer(data=request.data, context={'request': request})
        if not serializer.is_valid():
            return Response({'message': 'Password change failed', 'details': serializer.errors},
                            status=status.HTTP_400_BAD_REQUEST)

        request.user.set_password(serializer.validated_data['newPassword'])
        request.user.save(update_fields=['password'])

        logger.info(f"Password changed for user {request.user.id}")
        return Response({'message': 'Password updated successfully'})
    except Exception as e:
        logger.error(f"Change password error: {str(e)}")
        return Response({'message': 'Failed to change password'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
