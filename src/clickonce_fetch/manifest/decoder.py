"""Manifest decoder: parse ClickOnce manifest documents into Manifest models.

Parsing is lenient. Elements and attributes are matched by local name, so
namespaced documents (``asmv1:assembly``, ``dsig:DigestValue``, ...) and
plain ones decode the same way. Unknown elements and attributes are ignored
and missing optional values default to an empty string. Only unreadable
input or malformed markup is an error.
"""
import codecs
import logging
import re
import xml.etree.ElementTree as ET
from typing import Dict, Iterator, Optional

from clickonce_fetch.core.errors import DecodeError
from clickonce_fetch.manifest.models import (
    EntryRole,
    HashDescriptor,
    Manifest,
    ManifestEntry,
)

logger = logging.getLogger(__name__)

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")
_DECLARED_ENCODING = re.compile(
    rb"^\s*<\?xml[^>]*?encoding\s*=\s*[\"']([A-Za-z0-9._:-]+)[\"']"
)


def _local_name(name: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree adds to qualified names."""
    return name.rsplit("}", 1)[-1]


def _attributes(element: ET.Element) -> Dict[str, str]:
    return {_local_name(key): value for key, value in element.attrib.items()}


def _children(element: ET.Element, name: str) -> Iterator[ET.Element]:
    for child in element:
        if isinstance(child.tag, str) and _local_name(child.tag) == name:
            yield child


def _first_child(element: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    if element is None:
        return None
    return next(_children(element, name), None)


def _declared_encoding(data: bytes) -> Optional[str]:
    match = _DECLARED_ENCODING.match(data.lstrip(codecs.BOM_UTF8))
    if match is None:
        return None
    return match.group(1).decode("ascii")


def _parse_with_codec(data: bytes, encoding: str) -> ET.Element:
    """Decode the document with Python's codecs and parse the resulting text.

    Used for charsets the XML parser does not know about. The XML
    declaration is dropped since the text is already decoded.
    """
    text = data.decode(encoding)
    return ET.fromstring(_XML_DECLARATION.sub("", text, count=1))


def _parse_document(data: bytes) -> ET.Element:
    # expat reports multi-byte charsets with ValueError and unknown ones
    # with LookupError rather than ParseError.
    try:
        return ET.fromstring(data)
    except (ET.ParseError, LookupError, ValueError) as e:
        encoding = _declared_encoding(data)
        if encoding is None:
            raise DecodeError(f"Malformed manifest: {e}") from e
        logger.debug(f"Retrying manifest parse with '{encoding}' codec")
        try:
            return _parse_with_codec(data, encoding)
        except LookupError as codec_error:
            raise DecodeError(
                f"Unsupported manifest charset '{encoding}'"
            ) from codec_error
        except (UnicodeDecodeError, ET.ParseError) as retry_error:
            raise DecodeError(f"Malformed manifest: {retry_error}") from e


def _decode_hash(element: ET.Element) -> HashDescriptor:
    hash_element = _first_child(element, "hash")
    method = _first_child(hash_element, "DigestMethod")
    value = _first_child(hash_element, "DigestValue")
    return HashDescriptor(
        algorithm=_attributes(method).get("Algorithm", "") if method is not None else "",
        digest_value=(value.text or "").strip() if value is not None else "",
    )


def _decode_file(element: ET.Element) -> ManifestEntry:
    attrs = _attributes(element)
    return ManifestEntry(
        path=attrs.get("name", ""),
        size=attrs.get("size", ""),
        hash=_decode_hash(element),
        role=EntryRole.NON_ASSEMBLY_FILE,
    )


def _decode_dependent_assembly(element: ET.Element) -> ManifestEntry:
    attrs = _attributes(element)
    return ManifestEntry(
        path=attrs.get("codebase", ""),
        size=attrs.get("size", ""),
        hash=_decode_hash(element),
        role=EntryRole.ASSEMBLY_DEPENDENCY,
        dependency_type=attrs.get("dependencyType", ""),
        allow_delayed_binding=attrs.get("allowDelayedBinding", ""),
    )


def decode_manifest(data: bytes) -> Manifest:
    """Decode a ClickOnce manifest.

    Args:
        data: Raw manifest document

    Returns:
        Manifest with files and dependent assemblies in document order

    Raises:
        DecodeError: If the document is empty, malformed or uses an
            unknown charset
    """
    if not data or not data.strip():
        raise DecodeError("Manifest is empty")

    root = _parse_document(data)

    dependent_assemblies = [
        _decode_dependent_assembly(assembly)
        for dependency in _children(root, "dependency")
        for assembly in _children(dependency, "dependentAssembly")
    ]
    files = [_decode_file(f) for f in _children(root, "file")]

    logger.debug(
        f"Decoded manifest: {len(dependent_assemblies)} dependent assemblies, "
        f"{len(files)} files"
    )
    return Manifest(files=files, dependent_assemblies=dependent_assemblies)
