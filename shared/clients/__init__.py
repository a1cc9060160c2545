from .lookup import RemoteLookupClient, get_lookup_client

__all__ = ["RemoteLookupClient", "get_lookup_client"]
