"""netsup: an ordered network-service supervisor.

Starts dependent network daemons (by default the FRR routing suite, then
the snmpd SNMP agent) one after another, waits for each to become ready,
and stops them in reverse order on shutdown.
"""

from netsup.exceptions import NetsupError, ShutdownError, StartupError

__all__ = ["NetsupError", "ShutdownError", "StartupError"]
