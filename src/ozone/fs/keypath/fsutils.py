"""Translation between a filesystem-like path namespace and the flat keys of an object store.

Every directory operation built on top of an object store (listing, rename, recursive delete, ancestor lookups) needs
to agree on what the parent of a key is, what an immediate child is, and whether a key names a file or a directory.
The `KeyNamespace` class answers those questions for one `KeyLayout`; the module-level functions answer them for the
default layout, where keys are delimited by '/'.

Directory-shaped keys end with the delimiter (the empty key, the root of a bucket, is one of them); file-shaped keys
do not.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ozone.fs.keypath.config import KeyLayout
from ozone.fs.keypath.paths import KeyPath

logger = logging.getLogger(__name__)

__all__ = [
    "KeyNamespace",
    "add_trailing_slash_if_needed",
    "append_file_name_to_key_path",
    "get_file_count",
    "get_file_name",
    "get_immediate_child",
    "get_parent",
    "get_parent_dir",
    "is_file",
    "is_fs_optimized_bucket",
    "is_immediate_child",
    "is_valid_name",
    "path_to_key",
    "remove_trailing_slash_if_needed",
]


def _is_blank(value: str) -> bool:
    return not value.strip()


def _parse_boolean(value: str | None) -> bool:
    # Anything other than a case-insensitive 'true' is false, as with java.lang.Boolean.parseBoolean().
    return value is not None and value.casefold() == "true"


class KeyNamespace:
    """The path/key helpers for keys laid out according to a single `KeyLayout`.

    All methods are pure: a namespace holds nothing but its (frozen) layout, so a single instance can be shared freely
    between threads.
    """

    def __init__(self, layout: KeyLayout | None = None):
        self._layout = layout if layout is not None else KeyLayout()
        self._sep = self._layout.delimiter

    @property
    def layout(self) -> KeyLayout:
        return self._layout

    @property
    def sep(self) -> str:
        return self._sep

    def _key_path(self, key: str) -> KeyPath:
        return KeyPath(key, sep=self._sep)

    def path_to_key(self, path: str | KeyPath) -> str:
        """Return the key for an absolute path: the path with its leading delimiter removed."""
        text = str(path)
        if not text.startswith(self._sep):
            raise ValueError(f"path must be absolute: {text!r}")
        return text[1:]

    def get_parent(self, key_name: str) -> str:
        """Return the parent of a key, with a trailing delimiter, or '' if it has no parent.

        The parent of a top-level absolute key is the root, rendered as the delimiter.
        """
        parent = self._key_path(key_name).parent
        if parent is None:
            return ""
        return self.add_trailing_slash_if_needed(str(parent))

    def get_parent_dir(self, key_name: str) -> str:
        """Return the name of the directory holding a key, or '' if it has no parent.

        This is a single component, not a path: the parent directory of '/a/b/c/d/e/file1' is 'e'.
        """
        parent = self._key_path(key_name).parent
        if parent is None:
            return ""
        return parent.name

    def get_file_name(self, key_name: str) -> str:
        """Return the leaf name of a key: 'file1' for '/a/b/c/d/e/file1'.

        A key without any components (such as the root) is returned unchanged.
        """
        key_path = self._key_path(key_name)
        if not key_path.name_count:
            return key_name
        return key_path.name

    def get_file_count(self, key_name: str) -> int:
        """Return the number of components in a key, ignoring the root and redundant delimiters.

        The empty key is the root of the bucket and counts 0 components (java.nio would count it as 1).
        """
        return self._key_path(key_name).name_count

    def add_trailing_slash_if_needed(self, key: str) -> str:
        if not key.endswith(self._sep):
            return key + self._sep
        return key

    def remove_trailing_slash_if_needed(self, key: str) -> str:
        """Return a directory-shaped key in its canonical, file-shaped, form.

        Unlike `add_trailing_slash_if_needed()` this re-renders the whole key, so redundant interior delimiters are
        collapsed as well. The root stays as the delimiter.
        """
        if key.endswith(self._sep):
            return str(self._key_path(key))
        return key

    def is_file(self, key_name: str) -> bool:
        """Whether a key is file-shaped. Directory-shaped keys, the empty key among them, are never files."""
        return not self._key_path(key_name).is_dir_shaped()

    def is_valid_name(self, src: str) -> bool:
        """Whether a path is valid: absolute, canonical, and free of '.', '..' and ':' components.

        The path may end with the delimiter (denoting a directory), but it may not contain a doubled delimiter
        anywhere else.
        """
        if not src.startswith(self._sep):
            return False
        components = src.split(self._sep)
        last = len(components) - 1
        for i, element in enumerate(components):
            if element in {".", ".."} or ":" in element or self._sep in element:
                return False
            if not element and i not in {0, last}:
                return False
        return True

    def get_immediate_child(self, descendant: str, ancestor: str) -> str | None:
        """Return the immediate child of `ancestor` on the way down to `descendant`, or None if it isn't an ancestor.

        For ancestor '/a/b' and descendant '/a/b/c/d/e' the immediate child is the directory '/a/b/c/'. When the
        descendant is itself the immediate child it is returned as-is, without a trailing delimiter, so that files
        can be told apart from directories: for descendant '/a/b/c' the result is '/a/b/c'.
        """
        if ancestor:
            ancestor = self.add_trailing_slash_if_needed(ancestor)
        if not descendant.startswith(ancestor):
            return None
        descendant_path = self._key_path(descendant)
        ancestor_name_count = self._key_path(ancestor).name_count if ancestor else 0
        if descendant_path.name_count - ancestor_name_count > 1:
            return self.add_trailing_slash_if_needed(ancestor + descendant_path.get_name(ancestor_name_count))
        return descendant

    def is_immediate_child(self, parent_key: str, child_key: str) -> bool:
        """Whether `child_key` sits immediately below `parent_key`.

        A blank parent key stands for the root: top-level keys, absolute ('/a') or relative ('a'), are its immediate
        children. A blank child key has no parent at all.

        Both keys are compared in canonical form, so pass them in the same (absolute or relative) style.
        """
        if _is_blank(child_key):
            return False
        child_parent = self._key_path(child_key).parent
        if _is_blank(parent_key):
            return child_parent is None or str(child_parent) == self._sep
        return self._key_path(parent_key) == child_parent

    def append_file_name_to_key_path(self, key_name: str, file_name: str) -> str:
        return f"{key_name}{self._sep}{file_name}"

    def is_fs_optimized_bucket(self, bucket_metadata: Mapping[str, str]) -> bool:
        """Whether a bucket uses the filesystem-optimized layout, according to its metadata.

        Both the layout version and the 'filesystem paths enabled' flag must be set: missing or unparseable values
        count as not set.
        """
        layout = self._layout
        layout_version = bucket_metadata.get(layout.layout_version_key)
        layout_version_enabled = (
            layout_version is not None and layout_version.casefold() == layout.layout_version.casefold()
        )
        fs_paths = bucket_metadata.get(layout.enable_filesystem_paths_key)
        if fs_paths is not None and fs_paths.casefold() not in {"true", "false"}:
            logger.debug(f"Treating {layout.enable_filesystem_paths_key}={fs_paths!r} as false")
        fs_enabled = _parse_boolean(fs_paths)
        return layout_version_enabled and fs_enabled

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}({self._layout!r})"


_default = KeyNamespace()

path_to_key = _default.path_to_key
get_parent = _default.get_parent
get_parent_dir = _default.get_parent_dir
get_file_name = _default.get_file_name
get_file_count = _default.get_file_count
add_trailing_slash_if_needed = _default.add_trailing_slash_if_needed
remove_trailing_slash_if_needed = _default.remove_trailing_slash_if_needed
is_file = _default.is_file
is_valid_name = _default.is_valid_name
get_immediate_child = _default.get_immediate_child
is_immediate_child = _default.is_immediate_child
append_file_name_to_key_path = _default.append_file_name_to_key_path
is_fs_optimized_bucket = _default.is_fs_optimized_bucket
