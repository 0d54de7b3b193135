"""Provision a CentOS 7 host with source-built OpenSSL/Python and pip-installed Ansible.

Core design goals:
- Ordered, declared steps
- Idempotent: every step checks the host before acting
- Fail fast on the first error, no rollback
- All host access through one handle (testable with a fake)
- Centralized logging
"""

__all__ = []
