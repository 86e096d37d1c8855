"""Reading settings commands and generating Traefik and mapping configuration."""

from __future__ import annotations

from collections.abc import Iterable
from os import PathLike
from typing import Any

import yaml

from .command_parser import CommandSyntaxError, F5Command, parse_f5_command
from .models import (
    L7Settings,
    MappingConfig,
    MappingEntry,
    ServerInfo,
    ServiceGroup,
    ServiceGroupDef,
    TraefikConfig,
    TraefikHTTP,
    TraefikLoadBalancer,
    TraefikServer,
    TraefikService,
    VServerBinding,
    VServerInfo,
)

_ROUTER_SUFFIX = "@nacoscs"


class SettingsError(ValueError):
    """Raised when settings or generated configuration files cannot be read."""


def _normalized_object_type(command: F5Command) -> str:
    return command.object_type.replace(" ", "").lower()


class CommandProcessor:
    """Applies parsed commands to an :class:`L7Settings` collection."""

    def __init__(self, settings: L7Settings) -> None:
        self.settings = settings

    def process(self, command: F5Command) -> None:
        """Record what the command defines; unknown commands are ignored."""
        if command.action == "add":
            self._add(command)
        elif command.action == "bind":
            self._bind(command)
        # "set" and every other action define nothing new.

    def _add(self, command: F5Command) -> None:
        object_type = _normalized_object_type(command)
        if object_type == "server":
            self._add_server(command)
        elif object_type == "lbvserver":
            self._add_lb_vserver(command)
        elif object_type == "servicegroup":
            self._add_service_group(command)

    def _add_server(self, command: F5Command) -> None:
        if not command.arguments:
            raise SettingsError("add server command requires IP address argument")
        self.settings.servers.append(
            ServerInfo(
                name=command.name,
                ip=command.arguments[0],
                comment=command.parameters.get("-comment", ""),
            )
        )

    def _add_lb_vserver(self, command: F5Command) -> None:
        if len(command.arguments) < 3:
            raise SettingsError(
                "add lb vserver command requires protocol, IP, and port arguments"
            )
        protocol, ip, port = command.arguments[:3]
        self.settings.vservers.append(
            VServerInfo(name=command.name, protocol=protocol, ip=ip, port=port)
        )

    def _add_service_group(self, command: F5Command) -> None:
        protocol = command.arguments[0] if command.arguments else ""
        self.settings.service_group_defs.append(
            ServiceGroupDef(
                name=command.name,
                protocol=protocol,
                comment=command.parameters.get("-comment", ""),
            )
        )

    def _bind(self, command: F5Command) -> None:
        object_type = _normalized_object_type(command)
        if object_type == "servicegroup":
            self._bind_service_group(command)
        elif object_type == "lbvserver":
            self._bind_lb_vserver(command)

    def _bind_service_group(self, command: F5Command) -> None:
        # Monitor bindings carry no server or port.
        if command.parameters.get("-monitorName"):
            return
        if len(command.arguments) < 2:
            raise SettingsError(
                "bind serviceGroup command requires server name and port arguments"
            )
        self.settings.service_groups.append(
            ServiceGroup(
                name=command.name,
                server_name=command.arguments[0],
                port=command.arguments[1],
                comment=command.parameters.get("-comment", ""),
            )
        )

    def _bind_lb_vserver(self, command: F5Command) -> None:
        service_name = ""
        if command.arguments and not command.arguments[0].startswith("-"):
            service_name = command.arguments[0]
        params = command.parameters
        self.settings.vserver_bindings.append(
            VServerBinding(
                vserver_name=command.name,
                service_name=service_name,
                policy_name=params.get("-policyName", ""),
                priority=params.get("-priority", ""),
                goto_expression=params.get("-gotoPriorityExpression", ""),
                type=params.get("-type", ""),
                comment=params.get("-comment", ""),
            )
        )


def parse_l7_settings(lines: Iterable[str] | str) -> L7Settings:
    """Parse settings commands, one per line, into an :class:`L7Settings`.

    Blank lines and lines starting with ``#`` are skipped. Errors are raised
    as :class:`SettingsError` carrying the one-based line number.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()
    settings = L7Settings()
    processor = CommandProcessor(settings)
    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            command = parse_f5_command(line)
            if command is not None:
                processor.process(command)
        except (CommandSyntaxError, SettingsError) as exc:
            raise SettingsError(f"line {line_number}: {exc}") from exc
    return settings


def parse_l7_settings_file(path: str | PathLike[str]) -> L7Settings:
    """Parse a settings file."""
    with open(path, encoding="utf-8") as stream:
        return parse_l7_settings(stream)


def generate_traefik_config(
    servers: Iterable[ServerInfo],
    vservers: Iterable[VServerInfo],
    service_group_defs: Iterable[ServiceGroupDef],
    service_groups: Iterable[ServiceGroup],
) -> TraefikConfig:
    """Build one Traefik service per service group that has known servers."""
    server_map = {server.name: server for server in servers}
    def_map = {sg_def.name: sg_def for sg_def in service_group_defs}

    grouped: dict[str, list[ServiceGroup]] = {}
    for group in service_groups:
        grouped.setdefault(group.name, []).append(group)

    services: dict[str, TraefikService] = {}
    for service_name, groups in grouped.items():
        sg_def = def_map.get(service_name)
        service_comment = sg_def.comment if sg_def is not None else ""
        traefik_servers: list[TraefikServer] = []
        for group in groups:
            server = server_map.get(group.server_name)
            if server is None:
                continue
            traefik_servers.append(
                TraefikServer(url=f"http://{server.ip}:{group.port}", comment=server.comment)
            )
            if not service_comment and group.comment:
                service_comment = group.comment
        if traefik_servers:
            services[service_name] = TraefikService(
                load_balancer=TraefikLoadBalancer(servers=traefik_servers),
                comment=service_comment,
            )
    return TraefikConfig(http=TraefikHTTP(services=services))


def generate_mapping_config(
    vservers: Iterable[VServerInfo],
    service_group_defs: Iterable[ServiceGroupDef],
    service_groups: Iterable[ServiceGroup],
) -> MappingConfig:
    """Map each virtual server's ``ip:port`` to its router name."""
    def_map = {sg_def.name: sg_def for sg_def in service_group_defs}
    grouped: dict[str, list[ServiceGroup]] = {}
    for group in service_groups:
        grouped.setdefault(group.name, []).append(group)

    entries: list[MappingEntry] = []
    for vserver in vservers:
        sg_def = def_map.get(vserver.name)
        comment = sg_def.comment if sg_def is not None else ""
        if not comment:
            comment = next(
                (g.comment for g in grouped.get(vserver.name, []) if g.comment), ""
            )
        entries.append(
            MappingEntry(
                key=f"{vserver.ip}:{vserver.port}",
                value=f"{vserver.name}{_ROUTER_SUFFIX}",
                comment=comment,
            )
        )
    return MappingConfig(entries=entries)


def _load_yaml(path: str | PathLike[str], what: str) -> Any:
    try:
        stream = open(path, encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"failed to open {what} file: {exc}") from exc
    with stream:
        try:
            data = yaml.load(stream, Loader=yaml.BaseLoader)
        except yaml.YAMLError as exc:
            raise SettingsError(f"failed to parse {what} YAML: {exc}") from exc
    if data is None:
        raise SettingsError(f"failed to parse {what} YAML: empty document")
    return data


def _as_mapping(node: Any, where: str) -> dict[str, Any]:
    if node is None or node == "":
        return {}
    if not isinstance(node, dict):
        raise SettingsError(f"failed to parse Traefik config YAML: '{where}' is not a mapping")
    return node


def _as_scalar(node: Any, where: str) -> str:
    if node is None:
        return ""
    if not isinstance(node, str):
        raise SettingsError(f"failed to parse YAML: '{where}' is not a scalar")
    return node


def read_traefik_config(path: str | PathLike[str]) -> TraefikConfig:
    """Read a Traefik services file; comments are not kept."""
    data = _as_mapping(_load_yaml(path, "Traefik config"), "document")
    http = _as_mapping(data.get("http"), "http")
    services: dict[str, TraefikService] = {}
    for name, node in _as_mapping(http.get("services"), "services").items():
        service = _as_mapping(node, name)
        balancer = _as_mapping(service.get("loadBalancer"), "loadBalancer")
        server_nodes = balancer.get("servers")
        if server_nodes is None or server_nodes == "":
            server_nodes = []
        if not isinstance(server_nodes, list):
            raise SettingsError(
                f"failed to parse Traefik config YAML: servers of '{name}' is not a list"
            )
        servers = [
            TraefikServer(url=_as_scalar(_as_mapping(item, "server").get("url"), "url"))
            for item in server_nodes
        ]
        services[name] = TraefikService(load_balancer=TraefikLoadBalancer(servers=servers))
    return TraefikConfig(http=TraefikHTTP(services=services))


def read_mapping_config(path: str | PathLike[str]) -> MappingConfig:
    """Read a mapping file; comments are not kept."""
    data = _load_yaml(path, "mapping config")
    if not isinstance(data, dict):
        raise SettingsError("failed to parse mapping config YAML: document is not a mapping")
    entries = [
        MappingEntry(key=_as_scalar(key, "key"), value=_as_scalar(value, str(key)))
        for key, value in data.items()
    ]
    return MappingConfig(entries=entries)