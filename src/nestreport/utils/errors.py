from dataclasses import replace
from typing import Union
import traceback
from ..events import ErrorInfo

FailureError = Union[BaseException, ErrorInfo]

# Assertion helpers attach these for their own diagnostics.
DEBUG_CONTEXT_ATTRS = ("debug_context", "power_assert_context")

def strip_debug_context(err: FailureError) -> FailureError:
    if isinstance(err, ErrorInfo):
        return replace(err, debug_context=None) if err.debug_context is not None else err
    for attr in DEBUG_CONTEXT_ATTRS:
        if attr in getattr(err, "__dict__", {}):
            delattr(err, attr)
    return err

def format_error(err: FailureError) -> str:
    """Full multi-line diagnostic for a failed test."""
    if isinstance(err, ErrorInfo):
        if err.stack:
            return err.stack if err.message in err.stack else f"{err.message}\n{err.stack}"
        return err.message
    return "".join(traceback.format_exception(type(err), err, err.__traceback__)).rstrip("\n")
