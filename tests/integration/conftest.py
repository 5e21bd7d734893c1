"""Conftest for storage client integration tests.

The client runs against `FakeStorageServer`, an in-memory stand-in for the JSON API mounted
through `httpx.MockTransport`. It reproduces the quirks the client has to cope with: list
responses without ``items`` when empty, default object ACL entries without the bucket name and
error bodies of the form ``{"error": {...}}``.
"""

import base64
import hashlib
import json
from collections.abc import AsyncGenerator
from typing import Any
from urllib.parse import unquote

import httpx
import pytest
import pytest_asyncio

from gcstorage.auth.sources import StaticTokenSource
from gcstorage.client import StorageClient
from gcstorage.configs.storage import StorageConfig
from gcstorage.resources.bucket import Bucket, NewBucket

HOST = "https://storage.test"
API_PREFIX = ["storage", "v1"]
UPLOAD_PREFIX = ["upload", "storage", "v1"]
PROJECT_ID = "test-project"
PROJECT_NUMBER = "123456789"
SERVICE_ACCOUNT_EMAIL = "svc@test-project.iam.gserviceaccount.com"
ACCESS_TOKEN = "test-token"
NOW = "2024-05-01T12:00:00.000Z"


def error_response(code: int, message: str, reason: str) -> httpx.Response:
    """Build an error response in the shape the JSON API uses."""
    return httpx.Response(
        code,
        json={
            "error": {
                "code": code,
                "message": message,
                "errors": [{"domain": "global", "reason": reason, "message": message}],
            }
        },
    )


def not_found(what: str) -> httpx.Response:
    """404 for `what`."""
    return error_response(404, f"No such {what}.", "notFound")


def list_response(kind: str, items: list[dict[str, Any]], **extra: Any) -> httpx.Response:
    """List response that, like the real service, omits ``items`` when there are none."""
    body: dict[str, Any] = {"kind": kind, **extra}
    if items:
        body["items"] = items
    return httpx.Response(200, json=body)


class FakeStorageServer:
    """In-memory JSON API."""

    def __init__(self) -> None:
        """Initialize the fake server."""
        self.requests: list[httpx.Request] = []
        self.buckets: dict[str, dict[str, Any]] = {}
        self.objects: dict[tuple[str, str], dict[str, Any]] = {}
        self.data: dict[tuple[str, str], bytes] = {}
        self.bucket_acls: dict[str, dict[str, dict[str, Any]]] = {}
        self.default_object_acls: dict[str, dict[str, dict[str, Any]]] = {}
        self.object_acls: dict[tuple[str, str], dict[str, dict[str, Any]]] = {}
        self.iam_policies: dict[str, dict[str, Any]] = {}
        self.hmac_keys: dict[str, dict[str, Any]] = {}
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    def _etag(self) -> str:
        return base64.b64encode(f"etag-{self._next()}".encode()).decode()

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Route a request."""
        self.requests.append(request)

        if request.headers.get("Authorization") != f"Bearer {ACCESS_TOKEN}":
            return error_response(401, "Invalid Credentials", "authError")

        raw_path = request.url.raw_path.decode("ascii").split("?", 1)[0]
        segments = [unquote(segment) for segment in raw_path.strip("/").split("/")]

        if segments[: len(UPLOAD_PREFIX)] == UPLOAD_PREFIX:
            rest = segments[len(UPLOAD_PREFIX) :]
            if request.method == "POST" and len(rest) == 3 and rest[0] == "b" and rest[2] == "o":  # noqa: PLR2004
                return self.upload_object(request, rest[1])
            return not_found("upload endpoint")

        if segments[: len(API_PREFIX)] != API_PREFIX:
            return not_found("endpoint")

        return self.route(request, segments[len(API_PREFIX) :])

    def route(self, request: httpx.Request, path: list[str]) -> httpx.Response:  # noqa: C901, PLR0911, PLR0912
        """Route a JSON API request by its decoded path segments."""
        method = request.method

        match path:
            case ["b"]:
                return self.create_bucket(request) if method == "POST" else self.list_buckets()
            case ["b", bucket]:
                if method == "GET":
                    return self.read_bucket(bucket)
                if method == "PUT":
                    return self.update_bucket(request, bucket)
                if method == "DELETE":
                    return self.delete_bucket(bucket)
            case ["b", bucket, "iam"]:
                return self.iam_policy(request, bucket)
            case ["b", bucket, "iam", "testPermissions"]:
                return self.test_permissions(request, bucket)
            case ["b", bucket, "acl", *entity]:
                return self.acl(request, "bucketAccessControl", self.bucket_acls, bucket, bucket, None, entity)
            case ["b", bucket, "defaultObjectAcl", *entity]:
                return self.acl(
                    request, "objectAccessControl", self.default_object_acls, bucket, bucket, None, entity
                )
            case ["b", bucket, "o"]:
                return self.list_objects(request, bucket)
            case ["b", bucket, "o", name, "acl", *entity]:
                return self.acl(
                    request, "objectAccessControl", self.object_acls, (bucket, name), bucket, name, entity
                )
            case ["b", bucket, "o", name, "copyTo", "b", destination_bucket, "o", destination_name]:
                return self.copy_object(request, bucket, name, destination_bucket, destination_name)
            case ["b", bucket, "o", name, "compose"]:
                return self.compose_object(request, bucket, name)
            case ["b", bucket, "o", name]:
                if method == "GET":
                    return self.read_object(request, bucket, name)
                if method == "PUT":
                    return self.update_object(request, bucket, name)
                if method == "DELETE":
                    return self.delete_object(bucket, name)
            case ["projects", project, "hmacKeys", *access_id]:
                return self.hmac(request, project, access_id)

        return error_response(405, "Method not allowed.", "methodNotAllowed")

    # Buckets

    def create_bucket(self, request: httpx.Request) -> httpx.Response:
        """Create a bucket."""
        if request.url.params.get("project") != PROJECT_ID:
            return error_response(400, "Invalid project.", "invalid")

        body = json.loads(request.content)
        name = body["name"]
        if name in self.buckets:
            return error_response(409, "You already own this bucket.", "conflict")

        default_acl: dict[str, dict[str, Any]] = {}
        self.default_object_acls[name] = default_acl
        for entry in body.get("defaultObjectAcl", []):
            default_acl[entry["entity"]] = {
                "kind": "storage#objectAccessControl",
                "entity": entry["entity"],
                "role": entry["role"],
                "etag": self._etag(),
            }
        if default_acl:
            body["defaultObjectAcl"] = list(default_acl.values())

        bucket = {
            "location": "US",
            "storageClass": "STANDARD",
            **body,
            "kind": "storage#bucket",
            "id": name,
            "selfLink": f"{HOST}/storage/v1/b/{name}",
            "projectNumber": PROJECT_NUMBER,
            "timeCreated": NOW,
            "updated": NOW,
            "metageneration": "1",
            "etag": self._etag(),
        }
        self.buckets[name] = bucket
        return httpx.Response(200, json=bucket)

    def list_buckets(self) -> httpx.Response:
        """List buckets."""
        return list_response("storage#buckets", list(self.buckets.values()))

    def read_bucket(self, name: str) -> httpx.Response:
        """Read a bucket."""
        if name not in self.buckets:
            return not_found("bucket")
        return httpx.Response(200, json=self.buckets[name])

    def update_bucket(self, request: httpx.Request, name: str) -> httpx.Response:
        """Replace a bucket."""
        if name not in self.buckets:
            return not_found("bucket")

        current = self.buckets[name]
        bucket = {
            **json.loads(request.content),
            **{key: current[key] for key in ("kind", "id", "selfLink", "projectNumber", "timeCreated", "name")},
            "metageneration": str(int(current["metageneration"]) + 1),
            "etag": self._etag(),
        }
        self.buckets[name] = bucket
        return httpx.Response(200, json=bucket)

    def delete_bucket(self, name: str) -> httpx.Response:
        """Delete an empty bucket."""
        if name not in self.buckets:
            return not_found("bucket")
        if any(bucket == name for bucket, _ in self.objects):
            return error_response(409, "The bucket you tried to delete is not empty.", "conflict")
        del self.buckets[name]
        return httpx.Response(204)

    def iam_policy(self, request: httpx.Request, name: str) -> httpx.Response:
        """Read or replace the IAM policy of a bucket."""
        if name not in self.buckets:
            return not_found("bucket")

        if request.method == "PUT":
            policy = {**json.loads(request.content), "kind": "storage#policy", "etag": self._etag()}
            policy["resourceId"] = f"projects/_/buckets/{name}"
            self.iam_policies[name] = policy

        policy = self.iam_policies.setdefault(
            name,
            {
                "kind": "storage#policy",
                "resourceId": f"projects/_/buckets/{name}",
                "version": 1,
                "bindings": [
                    {"role": "roles/storage.legacyBucketOwner", "members": [f"projectOwner:{PROJECT_ID}"]}
                ],
                "etag": "CAE=",
            },
        )
        return httpx.Response(200, json=policy)

    def test_permissions(self, request: httpx.Request, name: str) -> httpx.Response:
        """Return the requested permissions the caller holds."""
        if name not in self.buckets:
            return not_found("bucket")

        held = [p for p in request.url.params.get_list("permissions") if p.startswith("storage.buckets.")]
        body: dict[str, Any] = {"kind": "storage#testIamPermissionsResponse"}
        if held:
            body["permissions"] = held
        return httpx.Response(200, json=body)

    # Access controls

    def acl(  # noqa: C901, PLR0911, PLR0913
        self,
        request: httpx.Request,
        kind: str,
        store: dict[Any, dict[str, dict[str, Any]]],
        key: Any,
        bucket: str,
        object_name: str | None,
        entity_segments: list[str],
    ) -> httpx.Response:
        """Serve an ACL collection or entry."""
        if bucket not in self.buckets:
            return not_found("bucket")
        if object_name is not None and (bucket, object_name) not in self.objects:
            return not_found("object")

        entries = store.setdefault(key, {})
        default_acl = store is self.default_object_acls

        def record(entity: str, role: str) -> dict[str, Any]:
            entry: dict[str, Any] = {"kind": f"storage#{kind}", "entity": entity, "role": role, "etag": self._etag()}
            if not default_acl:
                entry["bucket"] = bucket
                entry["id"] = f"{bucket}/{object_name or ''}/{entity}"
                entry["selfLink"] = f"{HOST}/storage/v1/b/{bucket}/acl/{entity}"
            if object_name is not None:
                entry["object"] = object_name
                entry["generation"] = self.objects[(bucket, object_name)]["generation"]
            if entity.startswith("user-") and "@" in entity:
                entry["email"] = entity.removeprefix("user-")
            return entry

        if not entity_segments:
            if request.method == "POST":
                body = json.loads(request.content)
                entries[body["entity"]] = record(body["entity"], body["role"])
                return httpx.Response(200, json=entries[body["entity"]])
            return list_response(f"storage#{kind}s", list(entries.values()))

        entity = entity_segments[0]
        if entity not in entries:
            return not_found("access control entry")

        if request.method == "GET":
            return httpx.Response(200, json=entries[entity])
        if request.method == "PUT":
            body = json.loads(request.content)
            del entries[entity]
            entries[body["entity"]] = record(body["entity"], body["role"])
            return httpx.Response(200, json=entries[body["entity"]])
        if request.method == "DELETE":
            del entries[entity]
            return httpx.Response(204)

        return error_response(405, "Method not allowed.", "methodNotAllowed")

    # Objects

    def _object_record(self, bucket: str, name: str, data: bytes, content_type: str) -> dict[str, Any]:
        generation = str(1_700_000_000_000_000 + self._next())
        return {
            "kind": "storage#object",
            "id": f"{bucket}/{name}/{generation}",
            "selfLink": f"{HOST}/storage/v1/b/{bucket}/o/{name}",
            "mediaLink": f"{HOST}/download/storage/v1/b/{bucket}/o/{name}?alt=media",
            "name": name,
            "bucket": bucket,
            "generation": generation,
            "metageneration": "1",
            "contentType": content_type,
            "storageClass": "STANDARD",
            "size": str(len(data)),
            "md5Hash": base64.b64encode(hashlib.md5(data).digest()).decode(),  # noqa: S324
            "timeCreated": NOW,
            "updated": NOW,
            "etag": self._etag(),
        }

    def _store_object(self, bucket: str, name: str, data: bytes, content_type: str, **extra: Any) -> httpx.Response:
        record = self._object_record(bucket, name, data, content_type) | extra
        self.objects[(bucket, name)] = record
        self.data[(bucket, name)] = data
        return httpx.Response(200, json=record)

    def upload_object(self, request: httpx.Request, bucket: str) -> httpx.Response:
        """Simple media upload."""
        if bucket not in self.buckets:
            return not_found("bucket")
        if request.url.params.get("uploadType") != "media" or "name" not in request.url.params:
            return error_response(400, "Upload requires uploadType=media and a name.", "invalid")

        content_type = request.headers.get("Content-Type", "application/octet-stream")
        return self._store_object(bucket, request.url.params["name"], request.content, content_type)

    def read_object(self, request: httpx.Request, bucket: str, name: str) -> httpx.Response:
        """Read object metadata or media."""
        if (bucket, name) not in self.objects:
            return not_found("object")
        if request.url.params.get("alt") == "media":
            return httpx.Response(
                200,
                content=self.data[(bucket, name)],
                headers={"Content-Type": self.objects[(bucket, name)]["contentType"]},
            )
        return httpx.Response(200, json=self.objects[(bucket, name)])

    def update_object(self, request: httpx.Request, bucket: str, name: str) -> httpx.Response:
        """Replace writable object metadata."""
        if (bucket, name) not in self.objects:
            return not_found("object")

        current = self.objects[(bucket, name)]
        body = json.loads(request.content)
        writable = ("contentType", "contentEncoding", "contentDisposition", "contentLanguage", "cacheControl")
        updated = {key: value for key, value in current.items() if key not in (*writable, "metadata")}
        updated |= {key: body[key] for key in (*writable, "metadata") if key in body}
        updated["metageneration"] = str(int(current["metageneration"]) + 1)
        updated["etag"] = self._etag()
        self.objects[(bucket, name)] = updated
        return httpx.Response(200, json=updated)

    def delete_object(self, bucket: str, name: str) -> httpx.Response:
        """Delete an object."""
        if (bucket, name) not in self.objects:
            return not_found("object")
        del self.objects[(bucket, name)]
        del self.data[(bucket, name)]
        self.object_acls.pop((bucket, name), None)
        return httpx.Response(204)

    def list_objects(self, request: httpx.Request, bucket: str) -> httpx.Response:
        """List objects with prefix, delimiter and paging support."""
        if bucket not in self.buckets:
            return not_found("bucket")

        params = request.url.params
        prefix = params.get("prefix", "")
        delimiter = params.get("delimiter")
        max_results = int(params.get("maxResults", "1000"))
        offset = int(params.get("pageToken", "0"))

        names = sorted(name for b, name in self.objects if b == bucket and name.startswith(prefix))
        prefixes: set[str] = set()
        matched: list[str] = []
        for name in names:
            rest = name[len(prefix) :]
            if delimiter and delimiter in rest:
                prefixes.add(prefix + rest.split(delimiter, 1)[0] + delimiter)
            else:
                matched.append(name)

        page = matched[offset : offset + max_results]
        extra: dict[str, Any] = {}
        if prefixes:
            extra["prefixes"] = sorted(prefixes)
        if offset + max_results < len(matched):
            extra["nextPageToken"] = str(offset + max_results)
        return list_response("storage#objects", [self.objects[(bucket, name)] for name in page], **extra)

    def copy_object(
        self, request: httpx.Request, bucket: str, name: str, destination_bucket: str, destination_name: str
    ) -> httpx.Response:
        """Copy an object."""
        if (bucket, name) not in self.objects:
            return not_found("object")
        if destination_bucket not in self.buckets:
            return not_found("bucket")

        overrides = json.loads(request.content or b"{}")
        source = self.objects[(bucket, name)]
        content_type = overrides.get("contentType", source["contentType"])
        extra = {"metadata": overrides["metadata"]} if "metadata" in overrides else {}
        return self._store_object(
            destination_bucket, destination_name, self.data[(bucket, name)], content_type, **extra
        )

    def compose_object(self, request: httpx.Request, bucket: str, name: str) -> httpx.Response:
        """Concatenate objects."""
        body = json.loads(request.content)
        parts: list[bytes] = []
        for source in body["sourceObjects"]:
            if (bucket, source["name"]) not in self.objects:
                return not_found("object")
            parts.append(self.data[(bucket, source["name"])])

        destination = body.get("destination") or {}
        content_type = destination.get("contentType", "application/octet-stream")
        return self._store_object(bucket, name, b"".join(parts), content_type, componentCount=len(parts))

    # HMAC keys

    def hmac(self, request: httpx.Request, project: str, access_id: list[str]) -> httpx.Response:  # noqa: PLR0911
        """Serve the HMAC key collection or a key."""
        if project != PROJECT_ID:
            return error_response(403, "Forbidden.", "forbidden")

        if not access_id:
            if request.method == "POST":
                return self.create_hmac_key(request)
            return list_response("storage#hmacKeysMetadata", list(self.hmac_keys.values()))

        key = self.hmac_keys.get(access_id[0])
        if key is None:
            return not_found("HMAC key")

        if request.method == "GET":
            return httpx.Response(200, json=key)
        if request.method == "PUT":
            key["state"] = json.loads(request.content)["state"]
            key["etag"] = self._etag()
            return httpx.Response(200, json=key)
        if request.method == "DELETE":
            if key["state"] != "INACTIVE":
                return error_response(400, "Cannot delete keys in 'ACTIVE' state.", "invalid")
            del self.hmac_keys[access_id[0]]
            return httpx.Response(204)

        return error_response(405, "Method not allowed.", "methodNotAllowed")

    def create_hmac_key(self, request: httpx.Request) -> httpx.Response:
        """Create an HMAC key."""
        email = request.url.params.get("serviceAccountEmail")
        if not email:
            return error_response(400, "Required parameter: serviceAccountEmail", "required")

        access_id = f"GOOG1E{self._next():020d}"
        metadata = {
            "kind": "storage#hmacKeyMetadata",
            "id": f"{PROJECT_ID}/{access_id}",
            "selfLink": f"{HOST}/storage/v1/projects/{PROJECT_ID}/hmacKeys/{access_id}",
            "accessId": access_id,
            "projectId": PROJECT_ID,
            "serviceAccountEmail": email,
            "state": "ACTIVE",
            "timeCreated": NOW,
            "updated": NOW,
            "etag": self._etag(),
        }
        self.hmac_keys[access_id] = metadata
        return httpx.Response(
            200, json={"kind": "storage#hmacKey", "metadata": dict(metadata), "secret": "c2VjcmV0LWtleQ=="}
        )


def make_config() -> StorageConfig:
    """Config pointing at the fake server."""
    return StorageConfig(
        base_url=f"{HOST}/storage/v1",
        upload_url=f"{HOST}/upload/storage/v1",
        project_id=PROJECT_ID,
        use_metadata_server=False,
    )


@pytest.fixture
def fake_storage() -> FakeStorageServer:
    """Fake JSON API."""
    return FakeStorageServer()


@pytest_asyncio.fixture
async def storage_client(fake_storage: FakeStorageServer) -> AsyncGenerator[StorageClient]:
    """Storage client talking to the fake JSON API."""
    async with (
        httpx.AsyncClient(transport=httpx.MockTransport(fake_storage.handle)) as http_client,
        StorageClient(
            make_config(),
            token_source=StaticTokenSource(ACCESS_TOKEN, service_account_email=SERVICE_ACCOUNT_EMAIL),
            http_client=http_client,
        ) as client,
    ):
        yield client


@pytest_asyncio.fixture
async def bucket(storage_client: StorageClient) -> Bucket:
    """A freshly created bucket."""
    return await storage_client.buckets.create(NewBucket(name="test-bucket"))
