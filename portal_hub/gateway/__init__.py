from .base import Account, BlobStore, Gateway, Identity, RecordStore, Session


def build_gateway(session_factory, minio_client, bucket: str) -> Gateway:
    from .identity import SqlIdentity
    from .records import SqlRecordStore
    from .storage import MinioBlobStore

    return Gateway(
        identity=SqlIdentity(session_factory),
        records=SqlRecordStore(session_factory),
        blobs=MinioBlobStore(minio_client, bucket),
    )


__all__ = [
    "Account",
    "BlobStore",
    "Gateway",
    "Identity",
    "RecordStore",
    "Session",
    "build_gateway",
]
