"""Building blocks for secure, deduplicated storage: chunking, compression, encryption, locking, metadata and chunk stores."""

__version__ = "0.1.0"

__all__ = ["__version__"]