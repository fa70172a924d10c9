"""Dispatch: strategy selection, handler resolution, invocation, coercion."""
