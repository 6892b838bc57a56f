from django.apps import AppConfig


class ProductsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.products"
    label = "products"

    def ready(self) -> None:
        from modules.products.events import (
            ProductCreated,
            ProductDeleted,
            ProductQuantityAdjusted,
            ProductStatusChanged,
            ProductUpdated,
        )
        from modules.products.handlers import (
            product_created_handler,
            product_deleted_handler,
            product_quantity_adjusted_handler,
            product_status_changed_handler,
            product_updated_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(ProductCreated, product_created_handler)
        event_bus.subscribe(ProductUpdated, product_updated_handler)
        event_bus.subscribe(ProductDeleted, product_deleted_handler)
        event_bus.subscribe(ProductStatusChanged, product_status_changed_handler)
        event_bus.subscribe(ProductQuantityAdjusted, product_quantity_adjusted_handler)
