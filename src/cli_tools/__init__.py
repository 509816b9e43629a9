"""Command-line clients for the Portainer and nginx-proxy-manager REST APIs."""

__version__ = "0.1.0"
