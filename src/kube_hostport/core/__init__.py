"""Shared runtime helpers: context, process execution, logging, polling."""
