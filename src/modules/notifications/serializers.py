"""Notification DRF serializers (read-only)."""

from __future__ import annotations

from rest_framework import serializers

from modules.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = [
            "id",
            "type",
            "title",
            "message",
            "payload",
            "read",
            "created_at",
        ]
        read_only_fields = fields


class FeedPageSerializer(serializers.Serializer):
    reset = serializers.BooleanField()
    cursor = serializers.UUIDField(allow_null=True)
    unread_count = serializers.IntegerField()
    results = NotificationSerializer(many=True, source="notifications")
