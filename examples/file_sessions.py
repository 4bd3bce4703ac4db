"""Scoped read/write sessions, blob keys and deletion."""

import tempfile

from blobfiles import (
    FileLockedError,
    InMemoryFileService,
    LocalFileService,
    blob_key_of,
    delete,
    file_of,
    from_path,
    open_writer,
    with_input_stream,
    with_output_stream,
    with_reader,
    with_writer,
)

# ---- Text sessions ----
# Defaults: UTF-8, locked, and the file is finalized when the writer closes.

service = InMemoryFileService()
file = service.create_new_blob_file("text/plain", "hello.txt")
with_writer(service, file, lambda writer: writer.write("some content\n"))
with_reader(service, file, lambda reader: print(f"[text] read back: {reader.read()!r}"))

# ---- Appending without finalizing ----

log = service.create_new_blob_file("text/plain", "log.txt")
with_writer(service, log, lambda writer: writer.write("first line\n"), {"finalize": False})
with_writer(service, log, lambda writer: writer.write("second line\n"), {"encoding": "US-ASCII"})
with_reader(service, log, lambda reader: print(f"[append] lines = {reader.readlines()}"))

# ---- Locking ----
# A second locked writer fails fast while the first one holds the lock.

draft = service.create_new_blob_file("text/plain")
with open_writer(service, draft, {"finalize": False}) as writer:
    writer.write("draft")
    try:
        with_writer(service, draft, lambda other: other.write("clash"))
    except FileLockedError as exc:
        print(f"[lock] {exc}")

# ---- Binary sessions and blob keys ----

image = with_output_stream(service, service.create_new_blob_file("image/png"), lambda s: s.write(b"\x89PNG"))
key = blob_key_of(service, image)
print(f"[blob key] {key} -> {file_of(service, key)}")
with_input_stream(service, image, lambda stream: print(f"[binary] {stream.read()!r}"))

# ---- Deletion ----

delete(service, service, image)
print(f"[delete] still stored: {service.has_file(image)}")
print(f"[from_path] {from_path('/blobstore/writable:elsewhere').file_system}")

# ---- LocalFileService ----
# Same API, persisted under a directory.

with tempfile.TemporaryDirectory() as tmpdir:
    local = LocalFileService(tmpdir)
    stored = with_writer(local, local.create_new_blob_file("text/plain"), lambda writer: writer.write("on disk"))
    print(f"\n[local] root={local.root}, key={blob_key_of(local, stored)}")
