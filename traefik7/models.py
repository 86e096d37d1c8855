"""Data records for parsed settings and generated configuration."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ServerInfo:
    """A back-end server and its IP address."""

    name: str
    ip: str
    comment: str = ""


@dataclass
class VServerInfo:
    """A load-balancing virtual server."""

    name: str
    protocol: str
    ip: str
    port: str


@dataclass
class ServiceGroup:
    """A server bound to a service group on a port."""

    name: str
    server_name: str
    port: str
    comment: str = ""


@dataclass
class ServiceGroupDef:
    """A service group definition from an add command."""

    name: str
    protocol: str = ""
    comment: str = ""


@dataclass
class VServerBinding:
    """A service or policy bound to a virtual server.

    ``service_name`` is empty for policy-only bindings.
    """

    vserver_name: str
    service_name: str = ""
    policy_name: str = ""
    priority: str = ""
    goto_expression: str = ""
    type: str = ""
    comment: str = ""


@dataclass
class TraefikServer:
    """One server URL of a load balancer."""

    url: str
    comment: str = ""


@dataclass
class TraefikLoadBalancer:
    """The server list of a Traefik service."""

    servers: list[TraefikServer] = field(default_factory=list)


@dataclass
class TraefikService:
    """A Traefik service with an optional descriptive comment."""

    load_balancer: TraefikLoadBalancer = field(default_factory=TraefikLoadBalancer)
    comment: str = ""


@dataclass
class TraefikHTTP:
    """The HTTP section of a Traefik configuration."""

    services: dict[str, TraefikService] = field(default_factory=dict)


@dataclass
class TraefikConfig:
    """A complete Traefik dynamic configuration."""

    http: TraefikHTTP = field(default_factory=TraefikHTTP)


@dataclass
class MappingEntry:
    """An ``ip:port`` to router mapping with an optional comment."""

    key: str
    value: str
    comment: str = ""


@dataclass
class MappingConfig:
    """An ordered list of mapping entries."""

    entries: list[MappingEntry] = field(default_factory=list)


@dataclass
class L7Settings:
    """Everything collected from a settings file."""

    servers: list[ServerInfo] = field(default_factory=list)
    vservers: list[VServerInfo] = field(default_factory=list)
    service_group_defs: list[ServiceGroupDef] = field(default_factory=list)
    service_groups: list[ServiceGroup] = field(default_factory=list)
    vserver_bindings: list[VServerBinding] = field(default_factory=list)