"""Argument matchers, expected calls with count and ordering rules, call sets and reporters."""

__version__ = "0.1.0"

__all__ = ["call", "callset", "matchers", "reporter"]