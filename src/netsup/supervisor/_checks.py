"""Readiness check implementations.

Each check observes state outside the supervisor: a listening TCP port,
an SNMP agent answering a GET, a probe command exiting 0, a file
appearing, or a line showing up in a log file.
"""

import re
import socket
from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - Used in runtime type annotations

import anyio
from pysnmp.error import PySnmpError

from netsup.exceptions import ProbeError

from ._snmp import snmp_get

SYS_DESCR_OID = "1.3.6.1.2.1.1.1.0"


@dataclass(frozen=True, slots=True)
class TcpPortCheck:
    """Ready when a TCP connection to host:port succeeds.

    Attributes:
        port: Port the service listens on.
        host: Host to connect to.
        connect_timeout: Seconds allowed for a single connection attempt.
    """

    port: int
    host: str = "127.0.0.1"
    connect_timeout: float = 1.0

    def describe(self) -> str:
        return f"tcp://{self.host}:{self.port}"

    async def check(self) -> bool:
        try:
            with anyio.fail_after(self.connect_timeout):
                stream = await anyio.connect_tcp(self.host, self.port)
        except socket.gaierror as e:
            msg = f"Cannot resolve {self.host}: {e}"
            raise ProbeError(msg, target=self.describe(), cause=e) from e
        except OSError:
            # Refused, unreachable or timed out: not listening yet
            return False

        await stream.aclose()
        return True


@dataclass(frozen=True, slots=True)
class SnmpCheck:
    """Ready when an SNMPv2c agent answers a GET request.

    Attributes:
        host: Agent address.
        port: Agent UDP port.
        community: SNMPv2c community string.
        oid: Object identifier to request.
        request_timeout: Seconds to wait for a response.
    """

    host: str = "127.0.0.1"
    port: int = 161
    community: str = "public"
    oid: str = SYS_DESCR_OID
    request_timeout: float = 1.0

    def describe(self) -> str:
        return f"snmp://{self.community}@{self.host}:{self.port}/{self.oid}"

    async def check(self) -> bool:
        try:
            response = await snmp_get(
                self.host,
                self.port,
                self.community,
                self.oid,
                self.request_timeout,
            )
        except PySnmpError as e:
            # Bad agent address or OID
            msg = f"Cannot query SNMP agent for {self.oid!r}: {e}"
            raise ProbeError(msg, target=self.describe(), cause=e) from e

        if response is None:
            return False

        if response.error_status:
            msg = (
                f"SNMP agent at {self.host}:{self.port} rejected the request: "
                f"{response.error_name} at index {response.error_index}"
            )
            raise ProbeError(msg, target=self.describe())

        return True


@dataclass(frozen=True, slots=True)
class CommandCheck:
    """Ready when a probe command exits with status 0.

    Attributes:
        command: Command and arguments to run.
    """

    command: tuple[str, ...]

    def describe(self) -> str:
        return f"command: {' '.join(self.command)}"

    async def check(self) -> bool:
        try:
            result = await anyio.run_process(self.command, check=False)
        except OSError as e:
            # Missing, not executable, or a path through a non-directory
            msg = f"Cannot run probe command {self.command[0]!r}: {e}"
            raise ProbeError(msg, target=self.describe(), cause=e) from e

        return result.returncode == 0


@dataclass(frozen=True, slots=True)
class FileCheck:
    """Ready when a path exists (a pid file, a socket, a marker file).

    Attributes:
        path: Path to look for.
    """

    path: Path

    def describe(self) -> str:
        return f"file: {self.path}"

    async def check(self) -> bool:
        return await anyio.Path(self.path).exists()


@dataclass(frozen=True, slots=True)
class LogLineCheck:
    """Ready when a line of a log file matches a regular expression.

    Attributes:
        path: Log file to scan.
        pattern: Regular expression searched for, line by line.
    """

    path: Path
    pattern: str

    def describe(self) -> str:
        return f"log: {self.path} =~ /{self.pattern}/"

    async def check(self) -> bool:
        try:
            text = await anyio.Path(self.path).read_text(errors="replace")
        except FileNotFoundError:
            return False
        except OSError as e:
            # Unreadable, or not a regular file
            msg = f"Cannot read log file {self.path}: {e}"
            raise ProbeError(msg, target=self.describe(), cause=e) from e

        return re.search(self.pattern, text, re.MULTILINE) is not None
