# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: BlobDocTextStore
# -----------------------------------------------------------------------------
import logging
import time
from typing import Dict, List, Optional

from azure.core.credentials import AzureNamedKeyCredential
from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings

from config.Config import Config
from document.DocTextStore import DocTextStore
from utility.logging_utils import get_class_logger

TEXT_SUFFIX = ".txt"


class BlobDocTextStore(DocTextStore):
    """
    Stores each document's extracted text as a UTF-8 blob `<document_id>.txt`
    in Azure Blob Storage.
    """

    def __init__(self, cfg: Config, *, logger: logging.Logger | None = None):
        self.cfg = cfg
        self.container = cfg.text_container
        self.logger = logger or get_class_logger(self.__class__)

        start_time = time.time()
        try:
            self.blob_service = BlobServiceClient(
                account_url=f"https://{cfg.storage_account}.blob.core.windows.net",
                credential=AzureNamedKeyCredential(cfg.storage_account, cfg.storage_key),
            )
            self.container_client = self.blob_service.get_container_client(self.container)
            try:
                self.container_client.create_container()
                self.logger.info("Created container '%s' for document text.", self.container)
            except ResourceExistsError:
                self.logger.debug("Container '%s' already exists.", self.container)

            elapsed = (time.time() - start_time) * 1000.0
            self.logger.info(
                "Initialised BlobDocTextStore for account '%s' container '%s' (%.1f ms)",
                cfg.storage_account,
                self.container,
                elapsed,
            )
        except Exception as e:
            elapsed = (time.time() - start_time) * 1000.0
            self.logger.exception(
                "Failed to initialise BlobServiceClient after %.1f ms: %s", elapsed, e
            )
            raise

    @staticmethod
    def _blob_name(document_id: str) -> str:
        return f"{document_id}{TEXT_SUFFIX}"

    def get_text(self, document_id: str) -> Optional[str]:
        start_time = time.time()
        blob_name = self._blob_name(document_id)
        try:
            blob_client = self.container_client.get_blob_client(blob_name)
            data = blob_client.download_blob().readall()
        except ResourceNotFoundError:
            self.logger.info("No stored text for document '%s'", document_id)
            return None
        except AzureError as e:
            elapsed = (time.time() - start_time) * 1000.0
            self.logger.exception(
                "Azure error while downloading '%s' after %.1f ms: %s", blob_name, elapsed, e
            )
            raise

        elapsed = (time.time() - start_time) * 1000.0
        self.logger.info(
            "Loaded text for '%s' (%d bytes) from '%s' (%.1f ms)",
            document_id,
            len(data),
            self.container,
            elapsed,
        )
        return data.decode("utf-8")

    def put_text(self, document_id: str, text: str, metadata: Optional[Dict[str, str]] = None) -> None:
        blob_name = self._blob_name(document_id)
        data = text.encode("utf-8")

        # IMPORTANT: metadata values must be str
        md = {str(k): str(v) for k, v in (metadata or {}).items()}
        md.setdefault("document_id", document_id)

        try:
            self.container_client.get_blob_client(blob_name).upload_blob(
                data,
                overwrite=True,
                metadata=md,
                content_settings=ContentSettings(content_type="text/plain; charset=utf-8"),
            )
        except AzureError as e:
            self.logger.exception("Azure error while uploading '%s': %s", blob_name, e)
            raise

        self.logger.info("Uploaded text -> '%s/%s' (%d bytes)", self.container, blob_name, len(data))

    def delete_text(self, document_id: str) -> bool:
        blob_name = self._blob_name(document_id)
        try:
            self.container_client.delete_blob(blob_name)
        except ResourceNotFoundError:
            return False
        except AzureError as e:
            self.logger.exception("Azure error while deleting '%s': %s", blob_name, e)
            raise
        self.logger.info("Deleted text blob '%s/%s'", self.container, blob_name)
        return True

    def list_document_ids(self) -> List[str]:
        try:
            names = [b.name for b in self.container_client.list_blobs()]
        except AzureError as e:
            self.logger.exception("Azure error while listing blobs in '%s': %s", self.container, e)
            raise
        return [n[: -len(TEXT_SUFFIX)] for n in names if n.endswith(TEXT_SUFFIX)]
