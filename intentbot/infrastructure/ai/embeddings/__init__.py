"""
Embedding services mapping sentences and tokens to fixed-length vectors.
"""

# from intentbot.infrastructure.ai.embeddings.embedding_service import EmbeddingService
