from .client import StripeClient, encode_form
from .webhook import construct_event

__all__ = ["StripeClient", "construct_event", "encode_form"]
