from sqldal.utils import logging, serializers, text

__all__ = ("logging", "serializers", "text")
