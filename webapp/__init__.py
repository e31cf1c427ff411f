"""Web package initialization"""
from .app import create_app, drain_forwards

__all__ = ['create_app', 'drain_forwards']
