from rest_framework import serializers
from .models import BloodRequest


class BloodRequestSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='id', read_only=True)
    requesterId = serializers.IntegerField(source='requester_id', read_only=True)
    donorId = serializers.IntegerField(source='donor_id', read_only=True)
    requesterName = serializers.CharField(source='requester.name', read_only=True)
    donorName = serializers.CharField(source='donor.name', read_only=True)
    bloodGroup = serializers.CharField(source='donor.blood_group', read_only=True)
    location = serializers.CharField(source='donor.location', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = BloodRequest
        fields = ('id', '_id', 'requesterId', 'donorId', 'requesterName', 'donorName', 'bloodGroup',
                  'location', 'status', 'note', 'rating', 'createdAt', 'updatedAt')
        read_only_fields = fields


class CreateBloodRequestSerializer(serializers.Serializer):
    donorId = serializers.IntegerField()
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1000)


class RequestNoteSerializer(serializers.Serializer):
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1000)
