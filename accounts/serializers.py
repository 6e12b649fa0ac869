from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers

from donors.models import Donor
from .models import User


class SignupSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password])
    bloodGroup = serializers.ChoiceField(choices=Donor.BLOOD_GROUP_CHOICES)
    location = serializers.CharField(max_length=200)
    phoneNumber = serializers.CharField(max_length=20)

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('An account with this email already exists.')
        return value

    def validate_phoneNumber(self, value):
        value = value.strip()
        if User.objects.filter(phone_number=value).exists():
            raise serializers.ValidationError('An account with this phone number already exists.')
        return value

    @transaction.atomic
    def create(self, validated_data):
        user = User.objects.create_user(
            username=validated_data['email'],
            email=validated_data['email'],
            password=validated_data['password'],
            phone_number=validated_data['phoneNumber'],
            user_type='donor',
        )
        return Donor.objects.create(
            user=user,
            name=validated_data['name'],
            blood_group=validated_data['bloodGroup'],
            location=validated_data['location'],
        )


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField()


class AdminLoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()


class ChangePasswordSerializer(serializers.Serializer):
    currentPassword = serializers.CharField()
    newPassword = serializers.CharField(validators=[validate_password])

    def validate(self, attrs):
        user = self.context['request'].user
        if not user.check_password(attrs['currentPassword']):
            raise serializers.ValidationError({'currentPassword': 'Current password is incorrect.'})
        return attrs


class UserProfileSerializer(serializers.ModelSerializer):
    userType = serializers.CharField(source='user_type', read_only=True)
    phoneNumber = serializers.CharField(source='phone_number', read_only=True)

    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'userType', 'phoneNumber')
