from .client import DEFAULT_RECOMMENDATIONS, PerplexityClient

__all__ = ["DEFAULT_RECOMMENDATIONS", "PerplexityClient"]
