"""SNMPv2c GET over pysnmp's asyncio high-level API."""

from __future__ import annotations

from dataclasses import dataclass

from pysnmp.error import PySnmpError
from pysnmp.hlapi.v3arch.asyncio import (
    CommunityData,
    ContextData,
    ObjectIdentity,
    ObjectType,
    SnmpEngine,
    UdpTransportTarget,
    get_cmd,
)
from pysnmp.proto import errind

# mpModel value selecting SNMPv2c
SNMP_VERSION_2C = 1


@dataclass(frozen=True, slots=True)
class SnmpResponse:
    """Outcome of a GET the agent answered.

    Attributes:
        error_status: 0 on success, otherwise an RFC 1905 error code.
        error_name: Symbolic name of the error status (e.g. "noError").
        error_index: 1-based index of the variable binding in error.
        oids: Object identifiers of the returned variable bindings.
    """

    error_status: int
    error_name: str
    error_index: int
    oids: tuple[str, ...]


async def snmp_get(
    host: str,
    port: int,
    community: str,
    oid: str,
    timeout: float,
) -> SnmpResponse | None:
    """Send one GetRequest without retries and wait for the answer.

    Returns:
        The response, or None if none arrived within the timeout.

    Raises:
        PySnmpError: If the agent address cannot be resolved, the OID is
            malformed, or the request fails for a reason other than a
            timeout.
    """
    engine = SnmpEngine()
    try:
        target = await UdpTransportTarget.create(
            (host, port), timeout=timeout, retries=0
        )
        error_indication, error_status, error_index, var_binds = await get_cmd(
            engine,
            CommunityData(community, mpModel=SNMP_VERSION_2C),
            target,
            ContextData(),
            ObjectType(ObjectIdentity(oid)),
        )
    finally:
        engine.close_dispatcher()

    if isinstance(error_indication, errind.RequestTimedOut):
        return None
    if error_indication:
        raise PySnmpError(str(error_indication))

    return SnmpResponse(
        error_status=int(error_status),
        error_name=error_status.prettyPrint(),
        error_index=int(error_index),
        oids=tuple(str(var_bind[0]) for var_bind in var_binds),
    )
