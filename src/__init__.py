"""infergate: retrying gateway for slow, cold-start-prone inference endpoints."""

from infergate.gateway.clock import CancellationToken
from infergate.gateway.fallback import invoke_with_fallback
from infergate.gateway.gateway import InferenceGateway
from infergate.gateway.models import InvocationResult, ModelCategory, RetryPolicy
from infergate.version import __version__

__all__ = [
    "CancellationToken",
    "InferenceGateway",
    "InvocationResult",
    "ModelCategory",
    "RetryPolicy",
    "__version__",
    "invoke_with_fallback",
]
