from .providers import GitHubOAuthClient, GoogleOAuthClient, OAuthProfile, OAuthProviderClient

__all__ = ["GitHubOAuthClient", "GoogleOAuthClient", "OAuthProfile", "OAuthProviderClient"]
