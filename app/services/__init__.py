"""
Services layer - business logic lives here, routes stay thin.

- geofence.py: service-area containment checks
- issue_service.py: resident issue submission and listing
- analytics_service.py: resident analytics aggregation
- notifier.py: event publishing (passed explicitly to services)
"""
