"""In-memory stand-ins for Motor, the media host and friends."""

import asyncio
import copy
from dataclasses import dataclass
from typing import Any, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from devevent.services.media import UploadResult

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _matches_value(stored: Any, condition: Any) -> bool:
    if isinstance(condition, dict):
        for op, operand in condition.items():
            if op == "$ne":
                if _matches_value(stored, operand):
                    return False
            elif op == "$in":
                values = stored if isinstance(stored, list) else [stored]
                if not any(v in operand for v in values):
                    return False
            else:
                raise NotImplementedError(op)
        return True
    if isinstance(stored, list) and not isinstance(condition, list):
        return condition in stored
    return stored == condition


def matches(document: dict, query: dict) -> bool:
    return all(_matches_value(document.get(k), v) for k, v in query.items())


@dataclass
class InsertResult:
    inserted_id: ObjectId


class FakeCursor:
    def __init__(self, documents: list[dict]):
        self._documents = documents
        self._limit: Optional[int] = None

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._documents = sorted(
            self._documents, key=lambda d: d.get(key), reverse=direction < 0
        )
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._limit = count
        return self

    async def to_list(self, length: Optional[int] = None) -> list[dict]:
        documents = self._documents
        if self._limit:
            documents = documents[: self._limit]
        if length is not None:
            documents = documents[:length]
        return [copy.deepcopy(d) for d in documents]


class FakeCollection:
    def __init__(self, name: str):
        self.name = name
        self.documents: list[dict] = []
        self.unique_keys: list[tuple[str, ...]] = []
        self.indexes: list[str] = []
        self.fail_with: Optional[Exception] = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def create_index(self, keys, unique: bool = False, name: Optional[str] = None) -> str:
        fields = tuple(k for k, _ in keys)
        if unique and fields not in self.unique_keys:
            self.unique_keys.append(fields)
        index_name = name or "_".join(fields)
        self.indexes.append(index_name)
        return index_name

    async def find_one(self, query: dict) -> Optional[dict]:
        self._check()
        for document in self.documents:
            if matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query: Optional[dict] = None) -> FakeCursor:
        self._check()
        return FakeCursor([d for d in self.documents if matches(d, query or {})])

    async def insert_one(self, document: dict) -> InsertResult:
        self._check()
        for fields in self.unique_keys:
            key = tuple(document.get(f) for f in fields)
            if any(tuple(d.get(f) for f in fields) == key for d in self.documents):
                raise DuplicateKeyError(f"E11000 duplicate key error: {fields}", code=11000)
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        self.documents.append(stored)
        return InsertResult(inserted_id=stored["_id"])

    async def count_documents(self, query: dict) -> int:
        self._check()
        return sum(1 for d in self.documents if matches(d, query))


class FakeAdmin:
    def __init__(self, client: "FakeClient"):
        self._client = client

    async def command(self, name: str) -> dict:
        return await self._client.command(name)


class FakeDatabase:
    def __init__(self, client: "FakeClient", name: str):
        self.client = client
        self.name = name
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    async def command(self, name: str) -> dict:
        return await self.client.command(name)


class FakeClient:
    """Mimics AsyncIOMotorClient: lazy, connects on the first command."""

    def __init__(self, uri: str, **options: Any):
        self.uri = uri
        self.options = options
        self.admin = FakeAdmin(self)
        self.databases: dict[str, FakeDatabase] = {}
        self.closed = False
        self.reachable = True
        self.ping_gate: Optional[asyncio.Event] = None

    async def command(self, name: str) -> dict:
        if self.ping_gate is not None:
            await self.ping_gate.wait()
        else:
            await asyncio.sleep(0)
        if not self.reachable:
            raise ServerSelectionTimeoutError("No servers available")
        return {"ok": 1.0}

    def __getitem__(self, name: str) -> FakeDatabase:
        if name not in self.databases:
            self.databases[name] = FakeDatabase(self, name)
        return self.databases[name]

    def close(self) -> None:
        self.closed = True


class ClientFactory:
    """Records every client built so tests can count connection attempts."""

    def __init__(self, reachable: bool = True):
        self.clients: list[FakeClient] = []
        self.reachable = reachable
        self.ping_gate: Optional[asyncio.Event] = None

    def __call__(self, uri: str, **options: Any) -> FakeClient:
        client = FakeClient(uri, **options)
        client.reachable = self.reachable
        client.ping_gate = self.ping_gate
        self.clients.append(client)
        return client

    @property
    def calls(self) -> int:
        return len(self.clients)


class FakeMediaClient:
    """Replaces the Cloudinary-backed MediaClient."""

    def __init__(self, url: str = "https://res.cloudinary.com/demo/image/upload/DevEvent/banner.png"):
        self.url = url
        self.uploads: list[dict[str, Any]] = []
        self.error: Optional[Exception] = None

    async def upload_image(
        self,
        data: bytes,
        filename: Optional[str] = None,
        folder: Optional[str] = None,
    ) -> UploadResult:
        self.uploads.append({"size": len(data), "filename": filename, "folder": folder})
        if self.error is not None:
            raise self.error
        return UploadResult(secure_url=self.url)
