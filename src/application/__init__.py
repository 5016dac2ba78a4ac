"""
application - Request context and the pure role / menu services.

Depends on domain/ only.
"""
