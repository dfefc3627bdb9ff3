"""Pytest fixtures for clickonce-fetch tests."""
import base64
import hashlib
from typing import Dict, List, Optional, Tuple

import pytest

from clickonce_fetch.deploy.transport import FetchResult

BASE = "https://example.test/app/"
ROOT_URL = BASE + "App.application"
APP_MANIFEST_URL = BASE + "Application_Files/App_1_0/App.exe.manifest"
APP_DIR = BASE + "Application_Files/App_1_0/"


class FakeTransport:
    """In-memory transport that records every fetched URL.

    Unknown URLs answer 404.
    """

    def __init__(self):
        self.responses: Dict[str, Tuple[int, bytes]] = {}
        self.redirects: Dict[str, str] = {}
        self.calls: List[str] = []

    def add(self, url: str, content: bytes, status: int = 200) -> None:
        self.responses[url] = (status, content)

    def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        final_url = self.redirects.get(url, url)
        status, content = self.responses.get(final_url, (404, b""))
        return FetchResult(status_code=status, content=content, url=final_url)


def digest_of(content: bytes, algorithm: str = "sha256") -> str:
    return base64.b64encode(hashlib.new(algorithm, content).digest()).decode("ascii")


def _hash_xml(content: bytes, algorithm: str, digest: Optional[str]) -> str:
    digest = digest if digest is not None else digest_of(content, algorithm)
    return (
        "<hash>"
        "<dsig:Transforms>"
        '<dsig:Transform Algorithm="urn:schemas-microsoft-com:HashTransforms.Identity" />'
        "</dsig:Transforms>"
        f'<dsig:DigestMethod Algorithm="http://www.w3.org/2000/09/xmldsig#{algorithm}" />'
        f"<dsig:DigestValue>{digest}</dsig:DigestValue>"
        "</hash>"
    )


def build_manifest(
    dependencies: Optional[List[dict]] = None,
    files: Optional[List[dict]] = None,
    encoding: str = "utf-8",
) -> bytes:
    """Build a namespaced ClickOnce manifest with correct sizes and digests.

    Each dependency is a dict with ``codebase`` and ``content`` and optional
    ``dependency_type`` (default "install"), ``size``, ``digest`` and
    ``algorithm``. Each file is a dict with ``name`` and ``content`` and the
    same optional keys.
    """
    parts = [
        f'<?xml version="1.0" encoding="{encoding}"?>',
        '<asmv1:assembly xsi:schemaLocation="urn:schemas-microsoft-com:asm.v1 assembly.adaptive.xsd" '
        'manifestVersion="1.0" '
        'xmlns:asmv1="urn:schemas-microsoft-com:asm.v1" '
        'xmlns="urn:schemas-microsoft-com:asm.v2" '
        'xmlns:dsig="http://www.w3.org/2000/09/xmldsig#" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">',
        '<assemblyIdentity name="App.exe" version="1.0.0.0" />',
    ]
    for dep in dependencies or []:
        content = dep.get("content", b"")
        algorithm = dep.get("algorithm", "sha256")
        size = dep.get("size", str(len(content)))
        parts.append(
            "<dependency>"
            f'<dependentAssembly dependencyType="{dep.get("dependency_type", "install")}" '
            f'allowDelayedBinding="true" codebase="{dep.get("codebase", "")}" size="{size}">'
            '<assemblyIdentity name="Dep" version="1.0.0.0" />'
            f'{_hash_xml(content, algorithm, dep.get("digest"))}'
            "</dependentAssembly>"
            "</dependency>"
        )
    for f in files or []:
        content = f.get("content", b"")
        algorithm = f.get("algorithm", "sha256")
        size = f.get("size", str(len(content)))
        parts.append(
            f'<file name="{f.get("name", "")}" size="{size}">'
            f'{_hash_xml(content, algorithm, f.get("digest"))}'
            "</file>"
        )
    parts.append("</asmv1:assembly>")
    return "".join(parts).encode(encoding)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def manifest_builder():
    """Return the manifest builder function."""
    return build_manifest


@pytest.fixture
def deployment(fake_transport: FakeTransport) -> Dict[str, any]:
    """Publish a two-level ClickOnce deployment on the fake transport.

    Layout:
        App.application                      -> install dependency on App.exe.manifest
        Application_Files/App_1_0/
            App.exe.manifest                 -> App.exe, App.exe.config, data\\readme.txt,
                                                preRequisite dependency on Prereq.dll
            App.exe.deploy
            App.exe.config.deploy
            data/readme.txt.deploy
            Prereq.dll.deploy                (served, never requested)

    Returns dict with:
        - transport: FakeTransport serving the deployment
        - root_url: URL of the deployment manifest
        - contents: manifest path -> bytes of every payload file
        - app_manifest_path: manifest path of the application manifest
        - prereq_url: URL of the preRequisite payload, which must stay unfetched
    """
    contents = {
        "App.exe": b"MZ\x90\x00 fake executable",
        "App.exe.config": b"<configuration />",
        "data\\readme.txt": b"Read me first.\n",
    }
    prereq = b"prerequisite installed separately"

    app_manifest = build_manifest(
        dependencies=[
            {"codebase": "App.exe", "content": contents["App.exe"]},
            {"codebase": "Prereq.dll", "content": prereq, "dependency_type": "preRequisite"},
        ],
        files=[
            {"name": "App.exe.config", "content": contents["App.exe.config"]},
            {"name": "data\\readme.txt", "content": contents["data\\readme.txt"]},
        ],
    )
    app_manifest_path = "Application_Files\\App_1_0\\App.exe.manifest"
    root_manifest = build_manifest(
        dependencies=[{"codebase": app_manifest_path, "content": app_manifest}],
    )

    fake_transport.add(ROOT_URL, root_manifest)
    fake_transport.add(APP_MANIFEST_URL, app_manifest)
    fake_transport.add(APP_DIR + "App.exe.deploy", contents["App.exe"])
    fake_transport.add(APP_DIR + "App.exe.config.deploy", contents["App.exe.config"])
    fake_transport.add(APP_DIR + "data/readme.txt.deploy", contents["data\\readme.txt"])
    fake_transport.add(APP_DIR + "Prereq.dll.deploy", prereq)

    return {
        "transport": fake_transport,
        "root_url": ROOT_URL,
        "contents": contents,
        "app_manifest_path": app_manifest_path,
        "app_manifest": app_manifest,
        "prereq_url": APP_DIR + "Prereq.dll.deploy",
    }
