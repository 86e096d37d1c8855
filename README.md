# traefik7

`traefik7` reads a file of load balancer L7 commands, one per line, and
produces two YAML files:

- `traefik-services.yaml`: Traefik HTTP services, one per service group that
  has at least one bound server that was defined with `add server`. Each bound
  server becomes a load balancer URL `http://<server-ip>:<port>`.
- `mapping.yaml`: a map from each virtual server's `IP:port` to
  `<vserver-name>@nacoscs`.

Blank lines and lines starting with `#` are skipped. Comments given with
`-comment` are carried over as YAML comments:

- a server's comment is written after its URL;
- a service's comment comes from `add serviceGroup`, or failing that from the
  first `bind serviceGroup` with a comment;
- a mapping entry's comment comes the same way from the service group whose
  name matches the virtual server.

## Installation

```
pip install .
```

## Usage

Generate both files into a new directory in the current directory, named
after the current local time (`yyyymmddhhMM`):

```
traefik7 -i l7_settings.txt
traefik7 l7_settings.txt
cat l7_settings.txt | traefik7
```

Print both configurations to standard output instead of writing files:

```
traefik7 -o -i l7_settings.txt
```

Verify a previously generated folder against the commands:

```
traefik7 -y -i l7_settings.txt -m 202401011200
cat l7_settings.txt | traefik7 -y -m 202401011200
```

Options:

| Option | Meaning |
| ------ | ------- |
| `-i FILE` | settings file; `-` or no value reads standard input |
| `-o` | print to standard output instead of writing files |
| `-y` | verification mode |
| `-m DIR` | folder holding `traefik-services.yaml` and `mapping.yaml` (required with `-y`) |

When no file is given and standard input is a terminal, the usage text is
printed. The command exits with status 1 on any error or failed verification,
and 0 otherwise.

Verification first checks the commands themselves: every bound server exists,
server and virtual server names are unique, and every `bind lb vserver` names
an existing virtual server (service groups with no bindings, and bindings to
services with no group, only give warnings). It then compares the folder with
what the commands produce: every expected Traefik service is present with
exactly the expected server URLs, and every expected mapping is present with
the expected value. Extra services or mappings in the folder only give
warnings.

## Example

Input:

```
add server web01 10.0.0.11 -comment "primary web"
add serviceGroup shop HTTP -comment "shop backend"
bind serviceGroup shop web01 8080
add lb vserver shop HTTP 192.168.1.10 80
```

`traefik-services.yaml`:

```yaml
http:
  services:
    # shop backend
    shop:
      loadBalancer:
        servers:
          - url: http://10.0.0.11:8080 # primary web
```

`mapping.yaml`:

```yaml
"192.168.1.10:80": "shop@nacoscs" # shop backend
```

## Library use

```python
import sys

from traefik7.settings import generate_traefik_config, parse_l7_settings_file
from traefik7.yaml_writer import write_traefik_config

settings = parse_l7_settings_file("l7_settings.txt")
config = generate_traefik_config(
    settings.servers, settings.vservers,
    settings.service_group_defs, settings.service_groups,
)
write_traefik_config(sys.stdout, config)
```

Modules:

- `traefik7.tokenizer`: `Tokenizer`, `Token`, `TokenType` and
  `tokenize_command()`.
- `traefik7.command_parser`: `parse_f5_command()` returns an `F5Command`
  (action, object type, name, arguments, parameters) or `None` for blank and
  comment lines; errors raise `CommandSyntaxError`.
- `traefik7.settings`: `parse_l7_settings()` (a string or an iterable of
  lines) and `parse_l7_settings_file()` return an `L7Settings`;
  `generate_traefik_config()`, `generate_mapping_config()`,
  `read_traefik_config()` and `read_mapping_config()`. Errors raise
  `SettingsError`, whose message carries the line number.
- `traefik7.yaml_writer`: `write_traefik_config()` and
  `write_mapping_config()` write to any text stream.
- `traefik7.verify`: `verify()`, `verify_traefik_services()`,
  `verify_mappings()`, `verify_service_coverage()`,
  `verify_vserver_coverage()` and `verify_with_mappings()`; each reports on
  standard output and returns `True` or `False`.
- `traefik7.models`: the dataclasses used throughout.

## What it does not do

Only `add server`, `add lb vserver`, `add serviceGroup`, `bind serviceGroup`
and `bind lb vserver` are acted on; every other command is parsed and then
ignored, and `bind serviceGroup` lines with `-monitorName` are skipped.
Monitors, policies, content switching and SSL settings are not carried over.
Only Traefik services are generated, always with `http://` URLs: no routers,
middlewares or TLS configuration. Comments in existing YAML files are not read
back.