from django.apps import AppConfig


class DeliveriesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.deliveries"
    label = "deliveries"

    def ready(self) -> None:
        from modules.deliveries.events import (
            DeliveryJobAdvanced,
            DeliveryJobClaimed,
            DeliveryJobCreated,
        )
        from modules.deliveries.handlers import (
            job_advanced_handler,
            job_claimed_handler,
            job_created_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(DeliveryJobCreated, job_created_handler)
        event_bus.subscribe(DeliveryJobClaimed, job_claimed_handler)
        event_bus.subscribe(DeliveryJobAdvanced, job_advanced_handler)
