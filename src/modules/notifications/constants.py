"""Notification type tags.

Stored as free text so consumers (chat, e-mail) can add their own tags;
these are the ones the fulfillment engine emits.
"""

from django.db import models


class NotificationType(models.TextChoices):
    DELIVERY_JOB = "delivery_job", "Delivery job"
    ORDER_STATUS = "order_status", "Order status"
    WELCOME = "welcome", "Welcome"
