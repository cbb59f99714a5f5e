"""VulnShop - deliberately vulnerable microservice demo."""

__version__ = "1.0.0"
