from .embeddings import (
    EmbeddingTable,
    cosine_similarity,
    add_vectors,
    average_vector,
    sentence_vector,
    embedding_dimension
)

__all__ = [
    "EmbeddingTable",
    "cosine_similarity",
    "add_vectors",
    "average_vector",
    "sentence_vector",
    "embedding_dimension"
]
