from .http_controller import HttpController, encode_documents

__all__ = ["HttpController", "encode_documents"]
