from rest_framework import serializers
from staffing.domain.models import Member, Notification, Service, SwapRequest, SwapStatus

class MemberSerializer(serializers.ModelSerializer):
    class Meta:
        model = Member
        fields = ["id","first_name","last_name","email"]
        read_only_fields = ("id","first_name","last_name","email")

class ServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ["id","title","date","time","location"]
        read_only_fields = ("id","title","date","time","location")

class SwapRequestSerializer(serializers.ModelSerializer):
    from_member = MemberSerializer(read_only=True)
    to_member = MemberSerializer(read_only=True)
    service = ServiceSerializer(read_only=True)
    service_id = serializers.IntegerField(read_only=True)
    service_title = serializers.CharField(source="service.title", read_only=True)

    class Meta:
        model = SwapRequest
        fields = ["id","from_member","to_member","service_id","service_title","service","date","status","message","created_at"]
        read_only_fields = fields

class SwapCreateSerializer(serializers.Serializer):
    service_id = serializers.IntegerField()
    date = serializers.DateField()
    to_member_id = serializers.IntegerField(required=False, allow_null=True)
    message = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)

class SwapDecisionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SwapStatus.choices)

class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ["id","type","title","message","data","read","created_at"]
        read_only_fields = fields
