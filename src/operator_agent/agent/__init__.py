"""Operator agent components.

- Settings loaded from environment / .env
- Structured logging
- A lock-guarded configuration store with bootstrap/steady-state merge
- Clients for the remote control service
- Configuration and trigger sync loops, run by a supervisor
"""
