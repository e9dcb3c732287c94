"""
Services Module - everything with state or side effects in the dispatch path.

- automation_service: AutomationService.dispatch, the entry point
- automation_handlers: one Strategy per automation family
- window_registry: owner of every opened window
- statistics / kv_store: running counters and their durable storage
- event_bus: lifecycle announcements for the UI and voice layers
- responses / chat_relay: what the user hears back
"""
