# users/serializers.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from permissions.roles import STAFF_ROLES, effective_capabilities_for

User = get_user_model()


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True)
    username = serializers.CharField(required=False, allow_blank=True, max_length=150)
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={"input_type": "password"},
    )
    first_name = serializers.CharField(required=False, allow_blank=True)
    last_name = serializers.CharField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=sorted(STAFF_ROLES), required=False)

    def validate(self, attrs):
        email = (attrs.get("email") or "").strip()
        username = (attrs.get("username") or "").strip()

        if not email and not username:
            raise serializers.ValidationError("Provide email or username.")
        if email and User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError({"email": "Email already registered."})
        if username and User.objects.filter(username__iexact=username).exists():
            raise serializers.ValidationError({"username": "Username already taken."})

        attrs["email"] = email
        attrs["username"] = username
        return attrs

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data.get("email") or None,
            username=validated_data.get("username") or "",
            password=validated_data["password"],
            first_name=validated_data.get("first_name", ""),
            last_name=validated_data.get("last_name", ""),
            role=validated_data.get("role") or User.ROLE_STAFF,
            is_staff=True,
        )


# ---------------- LOGIN (INPUT ONLY) ----------------
class LoginSerializer(serializers.Serializer):
    """
    Exactly one of email / username.
    Authentication itself happens in the view.
    """

    email = serializers.EmailField(required=False, allow_blank=True)
    username = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(write_only=True, style={"input_type": "password"})

    def validate(self, attrs):
        email = (attrs.get("email") or "").strip()
        username = (attrs.get("username") or "").strip()
        if bool(email) == bool(username):
            raise serializers.ValidationError("Provide either email or username (not both).")
        attrs["identifier"] = email or username
        return attrs


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    capabilities = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "role",
            "capabilities",
        ]

    def get_capabilities(self, obj) -> list[str]:
        return sorted(effective_capabilities_for(obj))


# ---------------- PASSWORD CHANGE ----------------
class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True, style={"input_type": "password"})
    new_password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={"input_type": "password"},
    )

    def validate_current_password(self, value):
        if not self.context["request"].user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value
