"""Procedure invocation by name"""

from .registry import ProcedureNotFoundError, call_procedure, registered_procedures

__all__ = ["ProcedureNotFoundError", "call_procedure", "registered_procedures"]
