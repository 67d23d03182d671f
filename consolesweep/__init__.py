"""consolesweep - context-aware console.log cleanup for JavaScript and TypeScript."""

__version__ = "1.3.0"
