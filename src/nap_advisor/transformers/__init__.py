"""Transformers from provider payloads to internal models."""

from nap_advisor.transformers.sleep import SleepTransformer

__all__ = ["SleepTransformer"]
