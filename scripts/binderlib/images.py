"""
Image resolution: turn an <img src> into a file on disk.

    http(s)://...   downloaded into the per-book temp folder
    app://...       app-internal URI, decoded to a direct path (no copy)
    anything else   vault-relative (or chapter-relative) path

Failures print a warning and resolve to None; the image is left out of
the book rather than failing the build.
"""

import hashlib
import os
import re
import shutil
import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import unquote, urlparse


RESOURCE_DIR = "resources"
USER_AGENT = "Mozilla/5.0 (markdown-binder)"


def resource_name(path_or_url):
    """Packaged file name for an image: the basename of its path."""
    path = urlparse(path_or_url).path if "://" in path_or_url else path_or_url
    name = os.path.basename(unquote(path))
    if not name:
        name = f"image-{_digest(path_or_url)}"
    return name


def _digest(text):
    return hashlib.sha1(text.encode("utf-8")).hexdigest()[:10]


def resource_href(name):
    """src attribute for an image inside a packaged section."""
    return f"../{RESOURCE_DIR}/{name}"


class ImageResolver:
    """
    Resolves image sources for one book.

    Usage:
        resolver = ImageResolver(vault_dir, temp_dir)
        path = resolver.resolve("https://example.com/a.png")
        ...
        resolver.cleanup()   # after a successful build
    """

    def __init__(self, vault_dir, temp_dir, timeout=15, max_workers=4):
        self.vault_dir = vault_dir
        self.temp_dir = temp_dir
        self.timeout = timeout
        self.max_workers = max_workers
        self._names = {}     # path → packaged name
        self._paths = {}     # packaged name → path

    # ── Single image ───────────────────────────────────────

    def resolve(self, src, context_dir=None):
        """Local path for an image source, or None if it cannot be had."""
        if src.startswith(("http://", "https://")):
            return self._download(src)
        if src.startswith("app://"):
            path = self._decode_app_uri(src)
        else:
            path = self._local_path(src, context_dir)

        if not os.path.isfile(path):
            print(f"  Warning: Image not found: {src}")
            return None
        return path

    def _download(self, url):
        # One folder per URL; different hosts may serve the same file name
        folder = os.path.join(self.temp_dir, _digest(url))
        os.makedirs(folder, exist_ok=True)
        local_path = os.path.join(folder, resource_name(url))

        try:
            request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                data = response.read()
        except (urllib.error.URLError, OSError, ValueError) as e:
            print(f"  Warning: Failed to download {url}: {e}")
            return None

        with open(local_path, "wb") as f:
            f.write(data)
        return local_path

    def _decode_app_uri(self, uri):
        path = unquote(urlparse(uri).path)
        # app://<id>/C:/... on Windows
        if re.match(r"^/[A-Za-z]:[/\\]", path):
            path = path[1:]
        if os.path.isabs(path) and os.path.exists(path):
            return path
        return os.path.join(self.vault_dir, path.lstrip("/"))

    def _local_path(self, src, context_dir):
        if src.startswith("file://"):
            return unquote(urlparse(src).path)

        path = unquote(re.split(r"[?#]", src, maxsplit=1)[0])
        if os.path.isabs(path):
            return path

        candidate = os.path.join(self.vault_dir, path)
        if not os.path.exists(candidate) and context_dir:
            nearby = os.path.join(context_dir, path)
            if os.path.exists(nearby):
                return nearby
        return candidate

    # ── Packaged names ─────────────────────────────────────

    def name_for(self, path):
        """
        Packaged name for a resolved image, stable for the whole book.

        The basename is used as is unless another file already took it;
        then a short hash of the path is appended before the extension.
        """
        path = os.path.abspath(path)
        if path in self._names:
            return self._names[path]

        name = resource_name(path)
        if name in self._paths:
            stem, extension = os.path.splitext(name)
            name = f"{stem}-{_digest(path)}{extension}"

        self._names[path] = name
        self._paths[name] = path
        return name

    # ── Batches ────────────────────────────────────────────

    def resolve_all(self, sources, context_dir=None):
        """Resolve several sources concurrently; results keep input order."""
        if not sources:
            return []
        workers = max(1, min(self.max_workers, len(sources)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda src: self.resolve(src, context_dir), sources))

    # ── Cleanup ────────────────────────────────────────────

    def cleanup(self):
        """Remove downloaded images. Safe to call when nothing was downloaded."""
        if os.path.isdir(self.temp_dir):
            shutil.rmtree(self.temp_dir, ignore_errors=True)
