"""
Utility helpers shared by routers and services.
"""
from bioskop.utils.security import (
    generate_order_id,
    generate_random_string,
    hash_password,
    verify_password,
)

__all__ = [
    'generate_order_id',
    'generate_random_string',
    'hash_password',
    'verify_password',
]
