from gatehouse.infrastructure.persistence.in_memory_store import InMemoryStore

__all__ = ["InMemoryStore"]
