"""Consistency checks of parsed settings against generated configuration files."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO, Union

from .models import (
    L7Settings,
    MappingConfig,
    ServiceGroup,
    TraefikConfig,
    VServerInfo,
)
from .settings import (
    SettingsError,
    generate_mapping_config,
    generate_traefik_config,
    parse_l7_settings,
    parse_l7_settings_file,
    read_mapping_config,
    read_traefik_config,
)

TRAEFIK_FILE_NAME = "traefik-services.yaml"
MAPPING_FILE_NAME = "mapping.yaml"

InputSource = Union[str, "os.PathLike[str]", TextIO]


def _duplicates(names: Iterable[str]) -> list[str]:
    """Return each name every time it occurs again after its first occurrence."""
    seen: set[str] = set()
    repeated: list[str] = []
    for name in names:
        if name in seen:
            repeated.append(name)
        seen.add(name)
    return repeated


def verify(settings: L7Settings) -> bool:
    """Run basic consistency checks on parsed settings, reporting on stdout."""
    success = True

    server_names = {server.name for server in settings.servers}
    for group in settings.service_groups:
        if group.server_name not in server_names:
            print(
                f"Error: Service group '{group.name}' references "
                f"non-existent server '{group.server_name}'"
            )
            success = False

    group_names = {group.name for group in settings.service_groups}
    for sg_def in settings.service_group_defs:
        if sg_def.name not in group_names:
            print(
                f"Warning: Service group '{sg_def.name}' is defined "
                "but has no server bindings"
            )

    for name in _duplicates(server.name for server in settings.servers):
        print(f"Error: Duplicate server name '{name}'")
        success = False

    for name in _duplicates(vserver.name for vserver in settings.vservers):
        print(f"Error: Duplicate vserver name '{name}'")
        success = False

    vserver_names = {vserver.name for vserver in settings.vservers}
    for binding in settings.vserver_bindings:
        if binding.vserver_name not in vserver_names:
            print(
                "Error: VServer binding references non-existent vserver "
                f"'{binding.vserver_name}'"
            )
            success = False
        # Policy-only bindings carry no service name.
        if binding.service_name and binding.service_name not in group_names:
            print(
                f"Warning: VServer binding '{binding.vserver_name}' references "
                f"service '{binding.service_name}' that has no group definition"
            )

    print(
        f"Found {len(settings.servers)} servers, {len(settings.vservers)} vservers, "
        f"{len(settings.service_group_defs)} service group definitions, "
        f"{len(settings.service_groups)} service group bindings, "
        f"{len(settings.vserver_bindings)} vserver bindings"
    )
    return success


def verify_traefik_services(expected: TraefikConfig, actual: TraefikConfig) -> bool:
    """Compare expected and actual Traefik services; unexpected ones only warn."""
    success = True
    actual_services = actual.http.services

    for name, expected_service in expected.http.services.items():
        actual_service = actual_services.get(name)
        if actual_service is None:
            print(f"❌ Missing Traefik service: {name}")
            success = False
            continue

        expected_count = len(expected_service.load_balancer.servers)
        actual_count = len(actual_service.load_balancer.servers)
        if expected_count != actual_count:
            print(
                f"❌ Service '{name}': expected {expected_count} servers, "
                f"found {actual_count}"
            )
            success = False

        missing = {server.url for server in expected_service.load_balancer.servers}
        for server in actual_service.load_balancer.servers:
            if server.url in missing:
                missing.discard(server.url)
            else:
                print(f"❌ Service '{name}': unexpected server URL: {server.url}")
                success = False

        for url in missing:
            print(f"❌ Service '{name}': missing server URL: {url}")
            success = False

        if expected_count == actual_count and not missing:
            print(f"✅ Service '{name}': {expected_count} servers correctly mapped")

    for name in actual_services:
        if name not in expected.http.services:
            print(f"⚠️  Unexpected Traefik service found: {name}")

    return success


def verify_mappings(expected: MappingConfig, actual: MappingConfig) -> bool:
    """Compare expected and actual mappings; unexpected ones only warn."""
    success = True
    expected_map = {entry.key: entry.value for entry in expected.entries}
    actual_map = {entry.key: entry.value for entry in actual.entries}

    for key, expected_value in expected_map.items():
        if key not in actual_map:
            print(f"❌ Missing mapping: {key} -> {expected_value}")
            success = False
        elif actual_map[key] != expected_value:
            print(
                f"❌ Incorrect mapping: {key} -> expected '{expected_value}', "
                f"found '{actual_map[key]}'"
            )
            success = False
        else:
            print(f"✅ Mapping verified: {key} -> {expected_value}")

    for key, value in actual_map.items():
        if key not in expected_map:
            print(f"⚠️  Unexpected mapping found: {key} -> {value}")

    return success


def verify_service_coverage(
    service_groups: Iterable[ServiceGroup], traefik_config: TraefikConfig
) -> bool:
    """Check that every service group has a Traefik service."""
    success = True
    names = dict.fromkeys(group.name for group in service_groups)
    for name in names:
        if name in traefik_config.http.services:
            print(f"✅ F5 service group '{name}' mapped to Traefik service")
        else:
            print(f"❌ F5 service group '{name}' not found in Traefik services")
            success = False
    return success


def verify_vserver_coverage(
    vservers: Iterable[VServerInfo], mapping_config: MappingConfig
) -> bool:
    """Check that every virtual server has a mapping entry."""
    success = True
    mapped = {entry.value.split("@", 1)[0] for entry in mapping_config.entries}
    for vserver in vservers:
        where = f"'{vserver.name}' ({vserver.ip}:{vserver.port})"
        if vserver.name in mapped:
            print(f"✅ F5 virtual server {where} mapped correctly")
        else:
            print(f"❌ F5 virtual server {where} not found in mappings")
            success = False
    return success


def verify_with_mappings(
    input_source: InputSource, mapping_folder: str | os.PathLike[str]
) -> bool:
    """Parse settings and compare them with the files in ``mapping_folder``.

    ``input_source`` is either a path to a settings file or an open text
    stream such as standard input.
    """
    from_stream = not isinstance(input_source, (str, os.PathLike))
    if from_stream:
        print(
            "Enhanced verification: comparing F5 commands from stdin "
            f"with mappings in '{mapping_folder}'"
        )
    else:
        print(
            f"Enhanced verification: comparing F5 commands in '{input_source}' "
            f"with mappings in '{mapping_folder}'"
        )

    try:
        if from_stream:
            settings = parse_l7_settings(input_source)  # type: ignore[arg-type]
        else:
            settings = parse_l7_settings_file(input_source)  # type: ignore[arg-type]
    except (SettingsError, OSError) as exc:
        print(f"Error parsing F5 settings: {exc}")
        return False

    if not verify(settings):
        print("Basic verification failed, skipping mapping verification")
        return False

    folder = Path(mapping_folder)
    traefik_path = folder / TRAEFIK_FILE_NAME
    mapping_path = folder / MAPPING_FILE_NAME
    if not traefik_path.exists():
        print(f"Error: Traefik services file not found: {traefik_path}")
        return False
    if not mapping_path.exists():
        print(f"Error: Mapping file not found: {mapping_path}")
        return False

    expected_traefik = generate_traefik_config(
        settings.servers,
        settings.vservers,
        settings.service_group_defs,
        settings.service_groups,
    )
    expected_mapping = generate_mapping_config(
        settings.vservers, settings.service_group_defs, settings.service_groups
    )

    success = True

    print("\n=== Verifying Traefik Services ===")
    try:
        actual_traefik = read_traefik_config(traefik_path)
    except SettingsError as exc:
        print(f"Error reading Traefik config: {exc}")
        success = False
    else:
        success = verify_traefik_services(expected_traefik, actual_traefik) and success

    print("\n=== Verifying IP:Port Mappings ===")
    try:
        actual_mapping = read_mapping_config(mapping_path)
    except SettingsError as exc:
        print(f"Error reading mapping config: {exc}")
        success = False
    else:
        success = verify_mappings(expected_mapping, actual_mapping) and success

    print("\n=== Verifying Service Coverage ===")
    success = verify_service_coverage(settings.service_groups, expected_traefik) and success

    print("\n=== Verifying Virtual Server Coverage ===")
    success = verify_vserver_coverage(settings.vservers, expected_mapping) and success

    if success:
        print("\n✅ Enhanced verification passed - all F5 commands correctly mapped!")
    else:
        print("\n❌ Enhanced verification failed - discrepancies found!")
    return success