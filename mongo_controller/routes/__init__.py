from .controller_router import controller_router, get_search_query

__all__ = ["controller_router", "get_search_query"]
