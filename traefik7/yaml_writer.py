"""Writers for the generated YAML files, keeping comments."""

from __future__ import annotations

from typing import TextIO

from .models import MappingConfig, TraefikConfig


def write_traefik_config(stream: TextIO, config: TraefikConfig) -> None:
    """Write the Traefik services configuration with comments."""
    stream.write("http:\n")
    stream.write("  services:\n")
    for name, service in config.http.services.items():
        if service.comment:
            stream.write(f"    # {service.comment}\n")
        stream.write(f"    {name}:\n")
        stream.write("      loadBalancer:\n")
        stream.write("        servers:\n")
        for server in service.load_balancer.servers:
            if server.comment:
                stream.write(f"          - url: {server.url} # {server.comment}\n")
            else:
                stream.write(f"          - url: {server.url}\n")


def write_mapping_config(stream: TextIO, config: MappingConfig) -> None:
    """Write the ``ip:port`` mapping configuration with comments."""
    for entry in config.entries:
        if entry.comment:
            stream.write(f'"{entry.key}": "{entry.value}" # {entry.comment}\n')
        else:
            stream.write(f'"{entry.key}": "{entry.value}"\n')