"""Multi-Decoder-Update (MDU) protocol: checksums, commands, timing, packets, receivers and encoder."""

__version__ = "0.1.0"