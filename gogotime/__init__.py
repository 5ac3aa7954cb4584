# GoGoTime - Multi-tenant time tracking API

__version__ = "0.1.0"
