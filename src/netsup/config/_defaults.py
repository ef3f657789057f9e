"""Built-in configuration: the profile of the FRR + snmpd container.

FRR starts first and must answer vtysh; snmpd follows and must answer an
SNMP GET. A config file replaces `services` as a whole.

Kept as a plain dict so it can be the base of `deep_merge`, which never
modifies its inputs.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "text",
        "file": "",
    },
    "supervisor": {
        "control_host": "127.0.0.1",
        "control_port": 0,
    },
    "services": [
        {
            "name": "frr",
            "command": ["/usr/lib/frr/frrinit.sh", "start"],
            "stop_command": ["/usr/lib/frr/frrinit.sh", "stop"],
            "daemonizes": True,
            "startup_timeout": 30.0,
            "required_files": ["/etc/frr/frr.conf"],
            "readiness": {
                "type": "command",
                "command": ["vtysh", "-c", "show version"],
            },
        },
        {
            "name": "snmpd",
            "command": ["service", "snmpd", "start"],
            "stop_command": ["service", "snmpd", "stop"],
            "daemonizes": True,
            "startup_timeout": 30.0,
            "requires": ["frr"],
            "required_files": ["/etc/snmp/snmpd.conf"],
            "readiness": {
                "type": "snmp",
                "host": "127.0.0.1",
                "port": 161,
                "community": "public",
            },
        },
    ],
}
