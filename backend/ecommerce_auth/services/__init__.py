"""Service layer: use cases orchestrating repositories and session ports.

Subpackages
-----------
- ``_shared``: base service, errors, DTOs and ports.
- ``auth``: registration, login, token lifecycle, password flows, guard.
- ``sessions``: refresh registry and access-token blacklist.
- ``users``: profile self-service and admin user management.
"""
