from .backends import BlobStore, FileBlobStore, SQLiteBlobStore, MemoryBlobStore, create_blob_store
from .flight_pack_store import FlightPackStore, normalize_flight_id, pack_key

__all__ = [
    "BlobStore",
    "FileBlobStore",
    "SQLiteBlobStore",
    "MemoryBlobStore",
    "create_blob_store",
    "FlightPackStore",
    "normalize_flight_id",
    "pack_key"
]
