"""JSON-RPC envelope, endpoint and transport layer."""

from memoryctl.rpc.client import RpcClient
from memoryctl.rpc.endpoints import EndpointResolver, EndpointTarget
from memoryctl.rpc.envelope import ContentBlock, RequestIdCounter, RpcRequest, build_request

__all__ = [
    "RpcClient",
    "EndpointResolver",
    "EndpointTarget",
    "ContentBlock",
    "RequestIdCounter",
    "RpcRequest",
    "build_request",
]
