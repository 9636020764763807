# staff/serializers.py

from __future__ import annotations

from rest_framework import serializers

from staff.models import Attendance, StaffMember, Task


class SkillsField(serializers.Field):
    """
    List of skill names. Writes accept a list or a comma-separated string.
    """

    def to_representation(self, value):
        return list(value or [])

    def to_internal_value(self, data):
        if data is None or data == "":
            return []
        if isinstance(data, str):
            parts = data.split(",")
        elif isinstance(data, (list, tuple)):
            parts = data
        else:
            raise serializers.ValidationError("Skills must be a list or a comma-separated string.")

        skills = []
        for part in parts:
            name = str(part).strip()
            if name and name not in skills:
                skills.append(name)
        return skills


class StaffMemberSerializer(serializers.ModelSerializer):
    skills = SkillsField(required=False)

    class Meta:
        model = StaffMember
        fields = [
            "id",
            "user",
            "name",
            "email",
            "phone",
            "role",
            "position",
            "department",
            "joining_date",
            "salary",
            "status",
            "address",
            "emergency_contact",
            "skills",
            "photo_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value


class AttendanceSerializer(serializers.ModelSerializer):
    staff_name = serializers.CharField(source="staff.name", read_only=True)

    class Meta:
        model = Attendance
        fields = [
            "id",
            "staff",
            "staff_name",
            "date",
            "check_in",
            "check_out",
            "status",
            "image_url",
            "created_at",
        ]
        read_only_fields = fields


class CheckInSerializer(serializers.Serializer):
    image_url = serializers.URLField(required=False, allow_blank=True, max_length=500)


class TaskSerializer(serializers.ModelSerializer):
    assigned_to_name = serializers.CharField(source="assigned_to.name", read_only=True)
    order_number = serializers.CharField(source="order.order_number", read_only=True, default=None)

    class Meta:
        model = Task
        fields = [
            "id",
            "assigned_to",
            "assigned_to_name",
            "order",
            "order_number",
            "assigned_by",
            "title",
            "description",
            "priority",
            "status",
            "due_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "assigned_by", "created_at", "updated_at"]


class TaskStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Task.Status.choices)
