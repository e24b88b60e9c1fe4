"""
FaceCollectionService - typed wrapper over AWS Rekognition face collections.

One collection per gallery, named from the album code. Faces are enrolled
under ExternalImageId = "photo-<position>" so search hits map back to
gallery photos.
"""

from typing import List

from botocore.exceptions import BotoCoreError, ClientError

from core.config import settings
from core.exceptions import (
    CollectionNotFoundError,
    EnrollmentError,
    NoFaceInProbeError,
    UpstreamUnavailableError,
)
from core.logging import get_logger
from models.domain.face import BoundingBox, FaceMatch, FaceRecord

logger = get_logger(__name__)

# Enroll-time errors that only concern the one image being indexed
IMAGE_ERROR_CODES = {
    "InvalidImageFormatException",
    "ImageTooLargeException",
    "InvalidParameterException",
}

DEFAULT_SEARCH_THRESHOLD = 85.0


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def collection_id_for(album_code: str, prefix: str = None) -> str:
    """Deterministic collection name for a gallery."""
    prefix = settings.face_collection_prefix if prefix is None else prefix
    return f"{prefix}{album_code.strip().lower()}"


def _face_record(face: dict) -> FaceRecord:
    box = face.get("BoundingBox")
    return FaceRecord(
        face_id=face.get("FaceId", ""),
        external_key=face.get("ExternalImageId"),
        confidence=float(face.get("Confidence", 0.0)),
        bounding_box=BoundingBox(
            width=box.get("Width", 0.0),
            height=box.get("Height", 0.0),
            left=box.get("Left", 0.0),
            top=box.get("Top", 0.0),
        ) if box else None,
    )


class FaceCollectionService:
    """
    Face collection client.

    All calls are blocking boto3 calls; async callers run them in a thread.
    """

    def __init__(self, rekognition_client):
        """
        Args:
            rekognition_client: boto3 Rekognition client (infrastructure/rekognition.py)
        """
        self.client = rekognition_client

    # ==================== Collections ====================

    def create_collection(self, collection_id: str) -> bool:
        """
        Create a collection. Idempotent.

        Returns:
            True if created, False if it already existed
        """
        try:
            self.client.create_collection(CollectionId=collection_id)
            logger.info(f"[FaceCollection] Created collection {collection_id}")
            return True
        except ClientError as e:
            if _error_code(e) == "ResourceAlreadyExistsException":
                logger.info(f"[FaceCollection] Collection already exists: {collection_id}")
                return False
            raise UpstreamUnavailableError(
                f"Failed to create face collection: {e}", operation="create_collection"
            )
        except BotoCoreError as e:
            raise UpstreamUnavailableError(
                f"Face recognition service unavailable: {e}", operation="create_collection"
            )

    def delete_collection(self, collection_id: str) -> bool:
        """
        Delete a collection. Idempotent.

        Returns:
            True if deleted, False if it did not exist
        """
        try:
            self.client.delete_collection(CollectionId=collection_id)
            logger.info(f"[FaceCollection] Deleted collection {collection_id}")
            return True
        except ClientError as e:
            if _error_code(e) == "ResourceNotFoundException":
                logger.info(f"[FaceCollection] Collection does not exist: {collection_id}")
                return False
            raise UpstreamUnavailableError(
                f"Failed to delete face collection: {e}", operation="delete_collection"
            )
        except BotoCoreError as e:
            raise UpstreamUnavailableError(
                f"Face recognition service unavailable: {e}", operation="delete_collection"
            )

    def list_collections(self) -> List[str]:
        """All collection IDs in the account/region."""
        collection_ids: List[str] = []
        kwargs = {"MaxResults": 100}
        try:
            while True:
                response = self.client.list_collections(**kwargs)
                collection_ids.extend(response.get("CollectionIds", []))
                next_token = response.get("NextToken")
                if not next_token:
                    break
                kwargs["NextToken"] = next_token
        except (ClientError, BotoCoreError) as e:
            raise UpstreamUnavailableError(
                f"Failed to list face collections: {e}", operation="list_collections"
            )
        return collection_ids

    # ==================== Enrollment ====================

    def enroll(self, collection_id: str, image_bytes: bytes, external_key: str) -> int:
        """
        Enroll the primary face of one image.

        At most one face is indexed (MaxFaces=1) and Rekognition's AUTO
        quality filter drops unusable faces.

        Returns:
            Number of faces enrolled (0 or 1). 0 means "no face found", not an error.

        Raises:
            EnrollmentError: the image itself was rejected
            UpstreamUnavailableError: the service could not be used
        """
        try:
            response = self.client.index_faces(
                CollectionId=collection_id,
                Image={"Bytes": image_bytes},
                ExternalImageId=external_key,
                DetectionAttributes=["DEFAULT"],
                MaxFaces=1,
                QualityFilter="AUTO",
            )
        except ClientError as e:
            if _error_code(e) in IMAGE_ERROR_CODES:
                raise EnrollmentError(external_key, _error_code(e))
            raise UpstreamUnavailableError(
                f"Failed to index faces: {e}", operation="index_faces"
            )
        except BotoCoreError as e:
            raise UpstreamUnavailableError(
                f"Face recognition service unavailable: {e}", operation="index_faces"
            )

        records = [
            _face_record(record.get("Face", {}))
            for record in response.get("FaceRecords", [])
        ]
        for record in records:
            logger.debug(f"[FaceCollection] Indexed face {record.face_id} for {external_key}")
        return len(records)

    # ==================== Search ====================

    def search(
        self,
        collection_id: str,
        probe_bytes: bytes,
        max_results: int = 10,
        similarity_threshold: float = DEFAULT_SEARCH_THRESHOLD
    ) -> List[FaceMatch]:
        """
        Search a collection with the largest face of the probe image.

        Matches keep the service's ordering (similarity descending).

        Raises:
            CollectionNotFoundError: collection was never created
            NoFaceInProbeError: no face found in the probe image
            UpstreamUnavailableError: the service could not be used
        """
        try:
            response = self.client.search_faces_by_image(
                CollectionId=collection_id,
                Image={"Bytes": probe_bytes},
                MaxFaces=max_results,
                FaceMatchThreshold=float(similarity_threshold),
                QualityFilter="AUTO",
            )
        except ClientError as e:
            code = _error_code(e)
            if code == "ResourceNotFoundException":
                raise CollectionNotFoundError(collection_id)
            if code in ("InvalidParameterException", "InvalidImageFormatException"):
                raise NoFaceInProbeError()
            raise UpstreamUnavailableError(
                f"Failed to search faces: {e}", operation="search_faces_by_image"
            )
        except BotoCoreError as e:
            raise UpstreamUnavailableError(
                f"Face recognition service unavailable: {e}", operation="search_faces_by_image"
            )

        matches = [
            FaceMatch(
                face=_face_record(match.get("Face", {})),
                similarity=float(match.get("Similarity", 0.0)),
            )
            for match in response.get("FaceMatches", [])
        ]
        logger.info(
            f"[FaceCollection] {len(matches)} match(es) in {collection_id} "
            f"at threshold {similarity_threshold}"
        )
        return matches
