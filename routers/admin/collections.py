"""
Face Collection Endpoints

Endpoints:
- GET /face-collections - All collection IDs
"""

import asyncio

from fastapi import APIRouter

from .helpers import get_face_collections

router = APIRouter()


@router.get("/face-collections")
async def list_face_collections():
    collections = await asyncio.to_thread(get_face_collections().list_collections)
    return {"collections": collections}
