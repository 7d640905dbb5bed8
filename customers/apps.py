from django.apps import AppConfig


class CustomersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "customers"
    verbose_name = "CRM"

    def ready(self):
        """Hook the logging and notification listeners onto the default event bus"""
        from services.event_listener import EventListenerService
        from services.events import get_event_bus

        self.event_listener = EventListenerService(get_event_bus())
        self.event_listener.register()
