from rest_framework import serializers
from donors.models import Donor


class DonorStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Donor.STATUS_CHOICES)
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class DonorVerificationSerializer(serializers.Serializer):
    verified = serializers.BooleanField()
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
