"""
Infrastructure package - external dependencies and integrations.

Modules:
- supabase.py - Unified Supabase client
- storage.py - Remote photo fetching
- rekognition.py - AWS Rekognition client factory
"""

from infrastructure.supabase import SupabaseClient
from infrastructure.storage import PhotoFetcher, resolve_photo_url
from infrastructure.rekognition import create_rekognition_client, get_rekognition_client

__all__ = [
    'SupabaseClient',
    'PhotoFetcher',
    'resolve_photo_url',
    'create_rekognition_client',
    'get_rekognition_client',
]
