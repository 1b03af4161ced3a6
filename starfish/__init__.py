"""Transaction metadata, wire protocol codec and registry and config-center extension points for a distributed transaction coordinator."""

__version__ = "1.0.0"