"""External code generator invocation."""

from .invoker import (
    GeneratorInvoker,
    GeneratorUnavailableError,
    build_arguments,
    significant_stderr,
)
from .models import GeneratorOptions, InvocationRequest, InvocationResult

__all__ = [
    "GeneratorInvoker",
    "GeneratorOptions",
    "GeneratorUnavailableError",
    "InvocationRequest",
    "InvocationResult",
    "build_arguments",
    "significant_stderr",
]
