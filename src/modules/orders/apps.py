from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"
    verbose_name = "Bakery orders"

    def ready(self) -> None:
        from modules.orders.handlers import register
        from shared.infrastructure.bus import event_bus

        register(event_bus)
