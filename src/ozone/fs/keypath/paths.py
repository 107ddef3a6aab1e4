from __future__ import annotations

from ozone.fs.keypath import _keysep

__all__ = ["KeyPath"]


class KeyPath:
    """A parsed object-store key, exposing its components in the manner of :class:`pathlib.PurePosixPath`.

    Keys in a flat object store only pretend to be hierarchical, so the parsing rules are spelled out here instead of
    being borrowed from the host platform:

     - A leading delimiter makes the key absolute; its root is the delimiter.
     - A trailing delimiter (or the empty key) makes the key directory-shaped. This is remembered, but it is not part
       of the canonical rendering.
     - Empty components produced by redundant delimiters collapse away.
     - The components `.` and `..` are kept as-is: they are never resolved.
    """

    # Implementation notes:
    #  - Instances are immutable; the canonical string and hash are computed once, on first use.
    #  - Equality is based on the delimiter and the canonical string. Directory-shape is not part of identity, so
    #    that `KeyPath("/a/")` equals `KeyPath("/a")`.
    #  - There is no ordering: comparing keys for order depends on the store, not on this class.
    __slots__ = (
        # The delimiter the key was split on.
        "_sep",
        # The root of the key: the delimiter when the key is absolute, otherwise ''.
        "_root",
        # The non-empty components of the key, relative to the root.
        "_path_parts",
        # Whether the raw key ended with the delimiter (or was empty).
        "_dir_shaped",
        # The cached str() value of the instance.
        "_str",
        # The cached hash() value of the instance.
        "_hash",
    )
    _str: str
    _hash: int

    parser = _keysep

    def __init__(self, key: str, *, sep: str | None = None) -> None:
        if not isinstance(key, str):
            msg = f"argument should be a str, not {type(key).__name__!r}"
            raise TypeError(msg)
        delimiter = sep if sep is not None else self.parser.sep
        root, path_parts = self._parse_and_normalize(key, delimiter)
        self._sep = delimiter
        self._root = root
        self._path_parts = path_parts
        self._dir_shaped = not key or key.endswith(delimiter)

    @classmethod
    def _parse_and_normalize(cls, key: str, sep: str) -> tuple[str, tuple[str, ...]]:
        """Parse and normalize a raw key.

        Args:
            key: the raw key to parse.
            sep: the delimiter between components.
        Returns:
            A tuple containing:
              - The normalized root for this key, or '' if there isn't any.
              - The non-empty key components, if any, (relative) to the root.
        """
        if not key:
            return "", ()
        root, rel = cls._splitroot(key, sep=sep)
        parsed = tuple(x for x in rel.split(sep) if x)
        return root, parsed

    @classmethod
    def _splitroot(cls, part: str, sep: str) -> tuple[str, str]:
        # Unlike posixpath there is nothing special about a '//'-prefix: any run of leading delimiters is the root.
        if part and part[0] == sep:
            return sep, part.lstrip(sep)
        return "", part

    def _with_parts(self, *path_parts: str) -> KeyPath:
        return type(self)(self._root + _keysep.join(*path_parts, delimiter=self._sep), sep=self._sep)

    def __str__(self) -> str:
        try:
            return self._str
        except AttributeError:
            self._str = self._root + self._sep.join(self._path_parts)
            return self._str

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}({str(self)!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, KeyPath):
            return NotImplemented
        return (self._sep, str(self)) == (other._sep, str(other))

    def __hash__(self) -> int:
        try:
            return self._hash
        except AttributeError:
            self._hash = hash((self._sep, str(self)))
            return self._hash

    @property
    def sep(self) -> str:
        return self._sep

    @property
    def root(self) -> str:
        return self._root

    @property
    def parts(self) -> tuple[str, ...]:
        """The components of the key, without the root."""
        return self._path_parts

    @property
    def name_count(self) -> int:
        """The number of components of the key; the root does not count."""
        return len(self._path_parts)

    def get_name(self, index: int) -> str:
        """Return the component at the given (zero-based) position."""
        if not 0 <= index < len(self._path_parts):
            msg = f"{self!r} has no component at index {index}"
            raise IndexError(msg)
        return self._path_parts[index]

    @property
    def name(self) -> str:
        path_parts = self._path_parts
        return path_parts[-1] if path_parts else ""

    @property
    def parent(self) -> KeyPath | None:
        """The parent of this key, or None if there isn't one.

        A relative key with a single component has no parent, and neither does the root. The parent of a top-level
        absolute key is the root.
        """
        path_parts = self._path_parts
        if not path_parts or (len(path_parts) == 1 and not self._root):
            return None
        return self._with_parts(*path_parts[:-1])

    @property
    def parents(self) -> tuple[KeyPath, ...]:
        parents = []
        parent = self.parent
        while parent is not None:
            parents.append(parent)
            parent = parent.parent
        return tuple(parents)

    def is_absolute(self) -> bool:
        return bool(self._root)

    def is_dir_shaped(self) -> bool:
        """Whether the raw key ended with the delimiter, or was empty."""
        return self._dir_shaped
