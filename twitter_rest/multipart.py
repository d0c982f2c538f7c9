"""Multipart/form-data bodies for media uploads."""
import os
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

from urllib3.filepost import encode_multipart_formdata

from .exceptions import ValidationError
from .utils import Params, iter_pairs

MEDIA_FIELD = "media[]"


class MultipartBody(NamedTuple):
    """A finished request body and the Content-Type (with boundary) it needs."""

    content_type: str
    data: bytes


def build_media_body(files: Sequence[Union[str, os.PathLike]], params: Optional[Params] = None,
                     boundary: Optional[str] = None) -> MultipartBody:
    """
    Build an upload body: one ``media[]`` part per file, then plain form fields.

    Each file is opened, read and closed before this returns, whatever happens.
    An unreadable path raises ValidationError.

    Args:
        files: Paths of the files to upload; each part is named by the base name
        params: Other form fields, written after the file parts
        boundary: Fixed boundary, random when omitted

    Returns:
        MultipartBody with the closing boundary already written
    """
    fields: List[Tuple[str, Union[str, Tuple[str, bytes]]]] = []
    for path in files:
        try:
            with open(path, "rb") as fh:
                content = fh.read()
        except OSError as exc:
            raise ValidationError(f"Cannot read media file {os.fspath(path)!r}") from exc
        fields.append((MEDIA_FIELD, (os.path.basename(os.fspath(path)), content)))
    fields.extend(iter_pairs(params or {}))

    data, content_type = encode_multipart_formdata(fields, boundary=boundary)
    return MultipartBody(content_type, data)
