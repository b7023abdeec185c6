import pytest
from django.core.management import call_command

from modules.accounts.constants import Role
from modules.accounts.models import UserRole
from modules.catalog.models import Product
from modules.orders.models import Order

pytestmark = pytest.mark.integration


def test_seed_data_is_repeatable():
    call_command("seed_data")
    call_command("seed_data")

    assert Product.objects.count() == 5
    assert Order.objects.count() == 5
    assert set(Order.objects.values_list("status", flat=True)) == {"pending"}
    assert UserRole.objects.filter(role=Role.DELIVERY_AGENT).count() == 2
