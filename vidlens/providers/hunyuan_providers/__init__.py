from .client import BatchPolicy, HunyuanClient, classify_error_code
from .signing import sign

__all__ = [
    'BatchPolicy',
    'HunyuanClient',
    'classify_error_code',
    'sign',
]
