from __future__ import annotations

"""
Analysis Endpoint Upload Client.

Sends a single file payload to the remote analysis service and folds every
possible outcome (2xx, 406, other HTTP errors, transport failures) into an
UploadResult. Never raises for network conditions; the caller decides what
to log and always moves on to the next file.
"""

import logging
from typing import Any, Dict, Optional

import requests

from workspace_mirror.domain.sync_models import UploadResult, UploadStatus
from workspace_mirror.infra.network.common import (
    DEFAULT_TIMEOUT,
    HTTP_NOT_ACCEPTABLE,
    USER_AGENT,
)

logger = logging.getLogger(__name__)


def post_upload(
        endpoint: str,
        payload: Dict[str, Any],
        timeout: Optional[float] = None,
) -> UploadResult:
    """
    POST one upload payload as JSON.

    No retries are attempted; a failed item is consumed by the caller.

    Args:
        endpoint: Absolute URL of the upload route.
        payload: JSON-serializable request body.
        timeout: Request timeout in seconds.

    Returns:
        UploadResult: ACCEPTED for 2xx, UNSUPPORTED for 406, FAILED otherwise.
    """
    headers = {"User-Agent": USER_AGENT}
    logger.debug(f"POST {endpoint} <- {payload.get('filePath', '?')}")
    try:
        response = requests.post(
            endpoint,
            json=payload,
            headers=headers,
            timeout=timeout or DEFAULT_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        return UploadResult(UploadStatus.FAILED, None, f"{type(e).__name__}: {e}")

    code = response.status_code
    if 200 <= code < 300:
        return UploadResult(UploadStatus.ACCEPTED, code, "OK")
    if code == HTTP_NOT_ACCEPTABLE:
        return UploadResult(UploadStatus.UNSUPPORTED, code, "File type not supported by server")

    detail = (response.text or "").strip()[:200]
    message = f"HTTP {code}: {detail}" if detail else f"HTTP {code}"
    return UploadResult(UploadStatus.FAILED, code, message)
