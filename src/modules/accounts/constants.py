"""Account roles.

A user may hold several roles at once (a seller who also buys).
"""

from django.db import models


class Role(models.TextChoices):
    BUYER = "buyer", "Buyer"
    SELLER = "seller", "Seller"
    ADMIN = "admin", "Admin"
    DELIVERY_AGENT = "delivery_agent", "Delivery agent"
