"""
Outbound integrations.

Thin async HTTP clients for the third-party services TowGo delegates to:
Perplexity (query enhancement and business search), Stripe (checkout and
subscriptions), OAuth identity providers, and the search-result-page scraper
used by the web-search fallback chain.
"""
