"""Core domain: priorities, messages, ports, dispatcher and registry."""
