# app/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Application initialization and default admin creation
- db: Database configuration and connection management
- errors: Error taxonomy shared by all services
- policy: Access policy predicates
- pubsub: Per-user realtime notification channel
- security: Password hashing and JWT tokens
"""
