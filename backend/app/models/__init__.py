from app.models.memory import Memory, MemoryAsset

__all__ = [
    "Memory",
    "MemoryAsset",
]
