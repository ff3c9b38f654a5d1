"""Hotel Ops API: keyset-paginated hotel operations backend."""

__version__ = "1.0.0"
