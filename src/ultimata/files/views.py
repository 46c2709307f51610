"""Product file download and admin upload views."""

import logging

from ultimata.catalog.services import get_product
from ultimata.core.api import ApiView, api_response, require_admin, require_auth
from ultimata.core.exceptions import Forbidden, NotFound, UpstreamUnavailable, ValidationError
from ultimata.orders.services import has_purchased

from .client import BlobStorageClient, BlobStorageError, BlobStorageUnavailable

logger = logging.getLogger(__name__)


class ProductDownloadView(ApiView):
    """GET /api/products/<id>/download/

    Buyers (and admins) get a download link for the product's file.
    """

    @require_auth
    def get(self, request, product_id):
        product = get_product(product_id)
        if not product.has_file:
            raise NotFound("Product has no downloadable file")
        if not self.auth.is_admin and not has_purchased(self.auth.user_id, product.pk):
            raise Forbidden("Purchase this product to download it")

        try:
            url = BlobStorageClient().get_download_link(product.file_id)
        except (BlobStorageError, BlobStorageUnavailable) as e:
            logger.warning("Download link failed", extra={"product_id": product.pk, "error": str(e)})
            raise UpstreamUnavailable("File storage is unavailable") from e

        return api_response({"url": url, "fileName": product.file_name, "fileSize": product.file_size})


class AdminUploadFileView(ApiView):
    """POST /api/admin/upload-file/ (multipart ``file``)"""

    @require_admin
    def post(self, request):
        upload = request.FILES.get("file")
        if upload is None:
            raise ValidationError("No file uploaded")

        try:
            result = BlobStorageClient().upload(upload.name, upload.read())
        except (BlobStorageError, BlobStorageUnavailable) as e:
            raise UpstreamUnavailable("File storage is unavailable") from e

        return api_response({"fileId": result.file_id, "name": result.name, "size": result.size}, status=201)
