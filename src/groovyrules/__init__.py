"""groovyrules — mixed Java/Groovy build rules and test harness generation."""

__version__ = "0.3.0"
