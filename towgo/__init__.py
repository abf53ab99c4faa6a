"""TowGo API server package."""
