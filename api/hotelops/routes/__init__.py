"""API routers of the Hotel Ops API."""

from . import agents, campaigns, messages, reviews, settings, social

routers = [
    reviews.router,
    messages.router,
    campaigns.router,
    social.router,
    agents.router,
    settings.router,
]

__all__ = ["routers"]
