from .scraper import SearchPageScraper, merge_results, parse_bing_results, parse_google_results
from .simulated import simulate_business_search

__all__ = [
    "SearchPageScraper",
    "merge_results",
    "parse_bing_results",
    "parse_google_results",
    "simulate_business_search",
]
