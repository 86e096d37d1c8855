import io

import pytest

from traefik7.models import (
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
from traefik7.settings import (
    generate_mapping_config,
    generate_traefik_config,
    parse_l7_settings,
)
from traefik7.verify import (
    verify,
    verify_mappings,
    verify_service_coverage,
    verify_traefik_services,
    verify_vserver_coverage,
    verify_with_mappings,
)
from traefik7.yaml_writer import write_mapping_config, write_traefik_config

COMMANDS = """\
# sample settings
add server web1 10.0.0.1 -comment "primary"
add server web2 10.0.0.2
add serviceGroup app HTTP -comment "app group"
bind serviceGroup app web1 80
bind serviceGroup app web2 8080
add lb vserver app HTTP 192.168.1.10 80
bind lb vserver app app
"""


def _settings():
    return L7Settings(
        servers=[ServerInfo("web1", "10.0.0.1"), ServerInfo("web2", "10.0.0.2")],
        vservers=[VServerInfo("app", "HTTP", "192.168.1.10", "80")],
        service_group_defs=[ServiceGroupDef("app", "HTTP")],
        service_groups=[
            ServiceGroup("app", "web1", "80"),
            ServiceGroup("app", "web2", "8080"),
        ],
        vserver_bindings=[VServerBinding("app", service_name="app")],
    )


def _config(services):
    return TraefikConfig(
        http=TraefikHTTP(
            services={
                name: TraefikService(
                    load_balancer=TraefikLoadBalancer(
                        servers=[TraefikServer(url) for url in urls]
                    )
                )
                for name, urls in services.items()
            }
        )
    )


def _write_folder(folder, settings):
    traefik = generate_traefik_config(
        settings.servers,
        settings.vservers,
        settings.service_group_defs,
        settings.service_groups,
    )
    mapping = generate_mapping_config(
        settings.vservers, settings.service_group_defs, settings.service_groups
    )
    with open(folder / "traefik-services.yaml", "w", encoding="utf-8") as stream:
        write_traefik_config(stream, traefik)
    with open(folder / "mapping.yaml", "w", encoding="utf-8") as stream:
        write_mapping_config(stream, mapping)


def test_verify_consistent_settings(capsys):
    assert verify(_settings()) is True
    out = capsys.readouterr().out
    assert (
        "Found 2 servers, 1 vservers, 1 service group definitions, "
        "2 service group bindings, 1 vserver bindings" in out
    )
    assert "Error" not in out


def test_verify_missing_server(capsys):
    settings = _settings()
    settings.service_groups.append(ServiceGroup("app", "ghost", "80"))
    assert verify(settings) is False
    assert "references non-existent server 'ghost'" in capsys.readouterr().out


def test_verify_duplicate_server(capsys):
    settings = _settings()
    settings.servers.append(ServerInfo("web1", "10.0.0.9"))
    assert verify(settings) is False
    assert "Duplicate server name 'web1'" in capsys.readouterr().out


def test_verify_duplicate_vserver(capsys):
    settings = _settings()
    settings.vservers.append(VServerInfo("app", "HTTP", "192.168.1.11", "80"))
    assert verify(settings) is False
    assert "Duplicate vserver name 'app'" in capsys.readouterr().out


def test_verify_binding_to_unknown_vserver(capsys):
    settings = _settings()
    settings.vserver_bindings.append(VServerBinding("nowhere"))
    assert verify(settings) is False
    assert "non-existent vserver 'nowhere'" in capsys.readouterr().out


def test_verify_binding_unknown_service_only_warns(capsys):
    settings = _settings()
    settings.vserver_bindings.append(VServerBinding("app", service_name="other"))
    assert verify(settings) is True
    assert "references service 'other' that has no group definition" in (
        capsys.readouterr().out
    )


def test_verify_policy_only_binding_is_not_checked(capsys):
    settings = _settings()
    settings.vserver_bindings.append(VServerBinding("app", policy_name="pol"))
    assert verify(settings) is True
    assert "Warning: VServer binding" not in capsys.readouterr().out


def test_verify_definition_without_bindings_warns(capsys):
    settings = _settings()
    settings.service_group_defs.append(ServiceGroupDef("lonely"))
    assert verify(settings) is True
    assert "'lonely' is defined but has no server bindings" in capsys.readouterr().out


def test_verify_traefik_services_identical(capsys):
    config = _config({"app": ["http://a:1", "http://b:2"]})
    other = _config({"app": ["http://b:2", "http://a:1"]})
    assert verify_traefik_services(config, other) is True
    assert "Service 'app': 2 servers correctly mapped" in capsys.readouterr().out


def test_verify_traefik_services_missing_service(capsys):
    assert verify_traefik_services(_config({"app": ["http://a:1"]}), _config({})) is False
    assert "Missing Traefik service: app" in capsys.readouterr().out


def test_verify_traefik_services_url_differences(capsys):
    expected = _config({"app": ["http://a:1"]})
    actual = _config({"app": ["http://a:1", "http://c:3"]})
    assert verify_traefik_services(expected, actual) is False
    out = capsys.readouterr().out
    assert "unexpected server URL: http://c:3" in out
    assert "expected 1 servers, found 2" in out


def test_verify_traefik_services_missing_url(capsys):
    expected = _config({"app": ["http://a:1"]})
    actual = _config({"app": ["http://c:3"]})
    assert verify_traefik_services(expected, actual) is False
    assert "missing server URL: http://a:1" in capsys.readouterr().out


def test_verify_traefik_services_extra_service_only_warns(capsys):
    expected = _config({"app": ["http://a:1"]})
    actual = _config({"app": ["http://a:1"], "extra": ["http://x:9"]})
    assert verify_traefik_services(expected, actual) is True
    assert "Unexpected Traefik service found: extra" in capsys.readouterr().out


def test_verify_mappings_cases(capsys):
    expected = MappingConfig([MappingEntry("1.2.3.4:80", "app@nacoscs")])
    assert verify_mappings(expected, expected) is True
    wrong = MappingConfig([MappingEntry("1.2.3.4:80", "other@nacoscs")])
    assert verify_mappings(expected, wrong) is False
    assert verify_mappings(expected, MappingConfig()) is False
    extra = MappingConfig(
        [MappingEntry("1.2.3.4:80", "app@nacoscs"), MappingEntry("k", "v")]
    )
    assert verify_mappings(expected, extra) is True
    out = capsys.readouterr().out
    assert "Incorrect mapping: 1.2.3.4:80 -> expected 'app@nacoscs'" in out
    assert "Unexpected mapping found: k -> v" in out


def test_verify_service_coverage():
    groups = [ServiceGroup("app", "web1", "80"), ServiceGroup("db", "web2", "5432")]
    assert verify_service_coverage(groups, _config({"app": [], "db": []})) is True
    assert verify_service_coverage(groups, _config({"app": []})) is False


def test_verify_vserver_coverage_strips_suffix():
    vservers = [VServerInfo("app", "HTTP", "1.2.3.4", "80")]
    covered = MappingConfig([MappingEntry("1.2.3.4:80", "app@nacoscs")])
    assert verify_vserver_coverage(vservers, covered) is True
    assert verify_vserver_coverage(vservers, MappingConfig()) is False


def test_verify_with_mappings_from_file(tmp_path, capsys):
    source = tmp_path / "settings.txt"
    source.write_text(COMMANDS, encoding="utf-8")
    _write_folder(tmp_path, parse_l7_settings(COMMANDS))
    assert verify_with_mappings(str(source), tmp_path) is True
    assert "Enhanced verification passed" in capsys.readouterr().out


def test_verify_with_mappings_from_stream(tmp_path):
    _write_folder(tmp_path, parse_l7_settings(COMMANDS))
    assert verify_with_mappings(io.StringIO(COMMANDS), tmp_path) is True


def test_verify_with_mappings_detects_wrong_mapping(tmp_path, capsys):
    _write_folder(tmp_path, parse_l7_settings(COMMANDS))
    (tmp_path / "mapping.yaml").write_text(
        '"192.168.1.10:80": "other@nacoscs"\n', encoding="utf-8"
    )
    assert verify_with_mappings(io.StringIO(COMMANDS), tmp_path) is False
    assert "Enhanced verification failed" in capsys.readouterr().out


def test_verify_with_mappings_missing_files(tmp_path, capsys):
    assert verify_with_mappings(io.StringIO(COMMANDS), tmp_path) is False
    assert "Traefik services file not found" in capsys.readouterr().out


def test_verify_with_mappings_parse_error(tmp_path, capsys):
    assert verify_with_mappings(io.StringIO("add server web1\n"), tmp_path) is False
    assert "Error parsing F5 settings" in capsys.readouterr().out


@pytest.mark.parametrize(
    "extra", ["bind serviceGroup app ghost 80\n", "add server web1 10.0.0.3\n"]
)
def test_verify_with_mappings_basic_failure(tmp_path, capsys, extra):
    _write_folder(tmp_path, parse_l7_settings(COMMANDS))
    assert verify_with_mappings(io.StringIO(COMMANDS + extra), tmp_path) is False
    assert "Basic verification failed" in capsys.readouterr().out