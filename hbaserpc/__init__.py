"""HBase RPC call objects, request and response messages, and cell block encoding."""

__version__ = "0.1.0"