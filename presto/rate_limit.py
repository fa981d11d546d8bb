"""Limiteur de requêtes par IP / Per-IP request limiter (login, inscription / login, registration)."""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
