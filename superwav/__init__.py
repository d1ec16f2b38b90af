"""Wave field synthesis, convolution, configuration reading and a start-time server for speaker arrays."""

__version__ = "0.1.0"

__all__ = [
    "benchmark",
    "configfile",
    "convolution",
    "messages",
    "server",
    "settings",
    "utils",
    "wfs",
]