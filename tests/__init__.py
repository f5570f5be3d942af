"""Test suite for the gatehouse engine.

Test structure follows the test pyramid:
- unit/: Unit tests - domain policies and services with mocked or in-memory ports
- integration/: Integration tests - real bcrypt, PyJWT, structlog and full flows
"""
