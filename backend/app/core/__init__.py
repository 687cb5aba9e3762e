# app/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Startup seeding of the caretaker directory
- db: Database configuration and connection management
- errors: Error taxonomy shared by the REST and WebSocket transports
- pubsub: Per-user WebSocket rooms for live chat delivery
- security: Password hashing and JWT credentials
"""
