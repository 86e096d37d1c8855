"""Turn load balancer L7 commands into Traefik services and IP:port mappings."""

__version__ = "0.1.0"