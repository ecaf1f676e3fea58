"""Human-readable connection details printed once the devnet is up."""

import json
from typing import List, Optional

from .bridge_client import LOCAL_HEAD_REQUEST
from .config import EndpointSettings


def validator_endpoint_lines(endpoints: EndpointSettings) -> List[str]:
    return [
        f"  - Validator RPC: {endpoints.validator_rpc_url}",
        f"  - Validator gRPC: {endpoints.validator_host}:{endpoints.grpc_port}",
        f"  - Validator API: http://{endpoints.validator_host}:{endpoints.api_port}",
    ]


def bridge_endpoint_lines(endpoints: EndpointSettings, auth_token: str) -> List[str]:
    body = json.dumps(LOCAL_HEAD_REQUEST, separators=(",", ":"))
    return [
        f"  - Bridge RPC: {endpoints.bridge_rpc_url}",
        f"  - Bridge Gateway: {endpoints.bridge_gateway_url}",
        f"  - Bridge Auth Token: {auth_token}",
        "",
        "📝 To interact with the bridge:",
        f'  curl -X POST -H "Authorization: Bearer {auth_token}" \\',
        '       -H "Content-Type: application/json" \\',
        f"       -d '{body}' \\",
        f"       {endpoints.bridge_rpc_url}",
    ]


def format_connection_summary(
    endpoints: EndpointSettings,
    *,
    include_validator: bool = True,
    auth_token: Optional[str] = None,
    degraded: bool = False,
) -> List[str]:
    """
    Lines describing where the running services can be reached.

    ``degraded`` marks a run where the bridge failed to start but the
    validator remains usable.
    """
    if degraded:
        lines = ["⚠️ Bridge failed to start; Celestia validator is still running!"]
    elif auth_token is not None and include_validator:
        lines = ["✨ Celestia devnet is running!"]
    elif auth_token is not None:
        lines = ["✨ Celestia bridge is running!"]
    else:
        lines = ["✨ Celestia validator is running!"]

    if include_validator:
        lines.extend(validator_endpoint_lines(endpoints))
    if auth_token is not None and not degraded:
        lines.extend(bridge_endpoint_lines(endpoints, auth_token))
    return lines


__all__ = ["bridge_endpoint_lines", "format_connection_summary", "validator_endpoint_lines"]
