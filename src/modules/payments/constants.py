from django.db import models

PAYSTACK = "paystack"
PAYSTACK_SIGNATURE_HEADER = "X-Paystack-Signature"
PAYSTACK_CHARGE_SUCCESS = "charge.success"

# Paystack reports amounts in the currency's minor unit (kobo for NGN).
MINOR_UNITS_PER_MAJOR = 100


class PaymentProvider(models.TextChoices):
    PAYSTACK = PAYSTACK, "Paystack"
    MANUAL = "manual", "Manual"
