"""
Use Cases

Organized into domain folders:
- bookings/: slots, booking and the session lifecycle
- admin/: session monitoring and operator actions
- audit/: session audit trails

Import from subdirectories.
"""
