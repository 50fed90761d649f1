"""Signature transformation rules and interface validation.

The leading ``context.Context`` argument and the trailing ``error`` result are
conventional in Go services and are stripped when a method is turned into
request/response exchanges. Detection is strictly positional: a context
argument anywhere but first, or an error result anywhere but last, passes
through untouched.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .errors import ValidationError
from .models import Field, Interface, Named, Signature, Variadic

CONTEXT_PACKAGE = "context"
CONTEXT_TYPE = "Context"
ERROR_TYPE = "error"
DEFAULT_ERROR_NAME = "err"


def is_context_first(args: Sequence[Field]) -> bool:
    if not args:
        return False
    first = args[0].type
    return (
        isinstance(first, Named)
        and first.qualifier == CONTEXT_PACKAGE
        and first.name == CONTEXT_TYPE
    )


def is_error_last(results: Sequence[Field]) -> bool:
    if not results:
        return False
    last = results[-1].type
    return isinstance(last, Named) and last.qualifier is None and last.name == ERROR_TYPE


def remove_context_if_first(args: Sequence[Field]) -> Tuple[Field, ...]:
    if is_context_first(args):
        return tuple(args[1:])
    return tuple(args)


def remove_error_if_last(results: Sequence[Field]) -> Tuple[Field, ...]:
    if is_error_last(results):
        return tuple(results[:-1])
    return tuple(results)


def last_result_error_name(signature: Signature) -> str:
    """Name of the trailing error result, ``err`` when it is absent or anonymous."""
    if is_error_last(signature.results):
        name = signature.results[-1].name
        if name:
            return name
    return DEFAULT_ERROR_NAME


def validate_interface(iface: Interface) -> None:
    """Reject interfaces the templates cannot render faithfully."""
    issues: List[str] = []
    if not iface.methods:
        issues.append(f"{iface.name}: interface has no methods")

    seen: set[str] = set()
    for signature in iface.methods:
        if not signature.name:
            issues.append(f"{iface.name}: method without a name")
            continue
        if signature.name in seen:
            issues.append(f"{signature.name}: duplicate method name")
        seen.add(signature.name)
        issues.extend(_validate_signature(signature))

    if issues:
        raise ValidationError(
            f"interface {iface.name} failed validation: " + "; ".join(issues),
            issues,
        )


def _validate_signature(signature: Signature) -> List[str]:
    issues: List[str] = []
    last_index = len(signature.args) - 1
    for index, arg in enumerate(signature.args):
        if not arg.name:
            issues.append(f"{signature.name}: argument {index} is unnamed")
        if isinstance(arg.type, Variadic) and index != last_index:
            issues.append(
                f"{signature.name}: variadic argument {arg.name or index} must be the last argument"
            )
    for index, result in enumerate(signature.results):
        if isinstance(result.type, Variadic):
            issues.append(f"{signature.name}: result {result.name or index} cannot be variadic")
    named_results = [result for result in signature.results if result.name]
    if named_results and len(named_results) != len(signature.results):
        issues.append(f"{signature.name}: results mix named and unnamed values")
    return issues


__all__ = [
    "CONTEXT_PACKAGE",
    "DEFAULT_ERROR_NAME",
    "is_context_first",
    "is_error_last",
    "last_result_error_name",
    "remove_context_if_first",
    "remove_error_if_last",
    "validate_interface",
]
